"""GHG forms — FastAPI persistence and export service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import Body, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ghgforms.config import settings
from ghgforms.db.database import Database, utc_timestamp
from ghgforms.models.common import ReportCode
from ghgforms.models.state import AppState
from ghgforms.orchestrator.export import DOCX_MEDIA_TYPE, ExportService

logger = logging.getLogger(__name__)

db = Database(settings.database_path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.connect()
    yield
    await db.close()


app = FastAPI(
    title="GHG Forms",
    description="Persistence and DOCX export for GHG verification report forms",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Routes ---


@app.get("/api/health")
async def health():
    return {"status": "OK", "timestamp": utc_timestamp()}


@app.get("/api/data/{user_id}")
async def read_user_data(user_id: str):
    """Return the saved blob for a user, or ``data: null`` when none exists."""
    try:
        data = await db.get_user_data(user_id)
    except Exception:
        logger.exception("Error reading data for user %s", user_id)
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to read data"})
    return {"success": True, "data": data}


@app.post("/api/data/{user_id}")
async def save_user_data(user_id: str, payload: dict = Body(...)):
    """Store any JSON object verbatim, stamped with ``lastUpdated``."""
    try:
        await db.save_user_data(user_id, payload)
    except Exception:
        logger.exception("Error saving data for user %s", user_id)
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to save data"})
    return {"success": True, "message": "Data saved successfully"}


@app.post("/api/export/{report_code}")
async def export_report(report_code: str, state: AppState):
    """Render one report from a full application state and return the DOCX."""
    try:
        code = ReportCode(report_code)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown report: {report_code}")

    result = await ExportService().export(state, code)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)

    return Response(
        content=result.content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}"},
    )


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("ghgforms.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
