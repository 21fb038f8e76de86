import asyncio
import contextlib
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

import structlog
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.session import SessionLocal
from app.models.token_denylist import TokenDenylist

logger = structlog.get_logger()

SessionFactory = Callable[[], Session]


def cleanup_expired_denylist_entries(db: Session, now: Optional[datetime] = None) -> int:
    """Delete denylist rows whose retention window has passed."""
    now = now or datetime.utcnow()
    try:
        deleted = (
            db.query(TokenDenylist)
            .filter(TokenDenylist.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
    except Exception:
        db.rollback()
        raise


def run_token_sweep(session_factory: SessionFactory = SessionLocal) -> int:
    """One sweep tick with its own session."""
    db = session_factory()
    try:
        deleted = cleanup_expired_denylist_entries(db)
    finally:
        db.close()
    logger.info("token_denylist_swept", deleted=deleted)
    return deleted


async def token_sweeper_loop(
    interval_seconds: float,
    session_factory: SessionFactory = SessionLocal,
) -> None:
    """Sweep the denylist every ``interval_seconds`` until cancelled.

    A failed tick is logged and the loop waits for the next one.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(run_token_sweep, session_factory)
        except Exception:
            logger.exception("token_sweep_failed")


@asynccontextmanager
async def run_token_sweeper(
    interval_seconds: float,
    session_factory: SessionFactory = SessionLocal,
):
    """Own the sweeper task for the duration of the ``async with`` block."""
    task = asyncio.create_task(
        token_sweeper_loop(interval_seconds, session_factory),
        name="token-denylist-sweeper",
    )
    logger.info("token_sweeper_started", interval_seconds=interval_seconds)
    try:
        yield task
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("token_sweeper_stopped")
