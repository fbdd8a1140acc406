import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from nextgen.db.connection import close_db, init_db
from nextgen.services.otp_service import purge_expired_codes

logger = logging.getLogger(__name__)

OTP_PURGE_INTERVAL_S = 3600


def _purge_otp_codes() -> None:
    try:
        deleted = purge_expired_codes()
    except Exception as exc:  # pragma: no cover
        logger.warning("otp_purge_failed: %s", exc)
        return
    if deleted:
        logger.info("otp_purge deleted=%s", deleted)


async def _otp_purge_loop(stop_event: asyncio.Event) -> None:
    while True:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=OTP_PURGE_INTERVAL_S)
            return
        except asyncio.TimeoutError:
            _purge_otp_codes()


@asynccontextmanager
async def lifespan(app):
    init_db()
    _purge_otp_codes()

    stop_event = asyncio.Event()
    purge_task = asyncio.create_task(_otp_purge_loop(stop_event))
    try:
        yield
    finally:
        stop_event.set()
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
        close_db()
