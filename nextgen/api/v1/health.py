import logging
import sqlite3

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from nextgen.db.connection import fetch_value

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the application and database status.")
async def health_check():
    try:
        now = fetch_value("SELECT strftime('%Y-%m-%dT%H:%M:%fZ', 'now')")
    except sqlite3.Error as exc:
        logger.error("health_check_failed: %s", exc)
        return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})
    return {"status": "ok", "time": now}
