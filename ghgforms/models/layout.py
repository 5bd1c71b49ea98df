"""Declarative document layout tree consumed by the DOCX renderer.

All dimensions are in twips (1/20 pt); border sizes are in eighths of a
point; font sizes are in points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

Align = Literal["left", "center", "right"]
LineRule = Literal["auto", "exact", "atLeast"]
HeightRule = Literal["auto", "exact", "atLeast"]
Orientation = Literal["portrait", "landscape"]

A4_WIDTH = 11906
A4_HEIGHT = 16838


@dataclass(frozen=True)
class FontSpec:
    ascii: str = "Times New Roman"
    east_asia: str = "標楷體"


@dataclass
class Run:
    """A span of uniformly formatted text, or a page-number field."""

    text: str = ""
    bold: bool = False
    size: float = 12
    underline: bool = False
    subscript: bool = False
    # Raised baseline offset in points
    position: float | None = None
    # Field instruction ("PAGE", "NUMPAGES"); replaces text when set
    field: str | None = None


@dataclass(frozen=True)
class Spacing:
    before: int | None = None
    after: int | None = None
    line: int | None = None
    rule: LineRule = "auto"


@dataclass(frozen=True)
class Indent:
    left: int | None = None


@dataclass
class Paragraph:
    runs: list[Run] = field(default_factory=list)
    align: Align = "left"
    spacing: Spacing | None = None
    indent: Indent | None = None
    page_break_before: bool = False


@dataclass(frozen=True)
class Border:
    style: Literal["single", "none", "nil"] = "single"
    size: int = 4
    color: str = "000000"


@dataclass(frozen=True)
class Borders:
    top: Border | None = None
    bottom: Border | None = None
    left: Border | None = None
    right: Border | None = None
    inside_h: Border | None = None
    inside_v: Border | None = None

    @classmethod
    def all(cls, border: Border) -> Borders:
        return cls(border, border, border, border, border, border)

    @classmethod
    def box(cls, top: Border, bottom: Border, left: Border, right: Border) -> Borders:
        return cls(top=top, bottom=bottom, left=left, right=right)


@dataclass(frozen=True)
class CellMargins:
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0


@dataclass
class Cell:
    blocks: list[Block] = field(default_factory=list)
    col_span: int = 1
    row_span: int = 1
    shading: str | None = None
    borders: Borders | None = None
    v_align: Literal["top", "center", "bottom"] | None = None
    margins: CellMargins | None = None


@dataclass
class Row:
    cells: list[Cell] = field(default_factory=list)
    height: int | None = None
    height_rule: HeightRule = "atLeast"
    repeat_header: bool = False


@dataclass
class Table:
    """A grid table; ``columns`` holds the grid column widths."""

    columns: list[int]
    rows: list[Row] = field(default_factory=list)
    borders: Borders | None = None
    fixed_layout: bool = False

    @property
    def width(self) -> int:
        return sum(self.columns)


Block = Union[Paragraph, Table]


@dataclass(frozen=True)
class PageSetup:
    orientation: Orientation = "portrait"
    top: int = 1134
    bottom: int = 1134
    left: int = 851
    right: int = 851
    header: int = 454
    footer: int = 454


@dataclass
class Section:
    name: str
    page: PageSetup = field(default_factory=PageSetup)
    header: list[Block] = field(default_factory=list)
    footer: list[Block] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)


@dataclass
class Document:
    sections: list[Section] = field(default_factory=list)
    font: FontSpec = field(default_factory=FontSpec)
    font_size: float = 12
    spacing: Spacing = field(default_factory=lambda: Spacing(before=40, after=40))

    @property
    def section_names(self) -> list[str]:
        return [s.name for s in self.sections]
