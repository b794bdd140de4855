"""
One-way export of journal statistics for the home screen widget.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import redis
from sqlalchemy.orm import Session

from .data import SummarySnapshot
from .. import db
from ..journal.actions import get_all_entries
from ..journal.statistics import (
    current_streak,
    journaled_days_in_month,
    monthly_entry_counts,
)
from ..utils.settings import WIDGET_SUMMARY_KEY

logger = logging.getLogger(__name__)


def export_summary(db_session: Session, now: Optional[datetime] = None) -> SummarySnapshot:
    if now is None:
        now = datetime.now()

    entry_dates = [entry.timestamp for entry in get_all_entries(db_session)]
    return SummarySnapshot(
        journaled_days=sorted(journaled_days_in_month(entry_dates, now.year, now.month)),
        total_entries=len(entry_dates),
        current_streak=current_streak(entry_dates, now),
        monthly_entries=monthly_entry_counts(entry_dates),
        last_sync=now,
    )


def snapshot_as_json_dict(snapshot: SummarySnapshot) -> Dict[str, Any]:
    return {
        "journaled_days": snapshot.journaled_days,
        "total_entries": snapshot.total_entries,
        "current_streak": snapshot.current_streak,
        "monthly_entries": snapshot.monthly_entries,
        "last_sync": snapshot.last_sync.isoformat(),
    }


def publish_summary(redis_client: redis.Redis, snapshot: SummarySnapshot) -> bool:
    """
    Best-effort write of the snapshot to the widget channel.
    """
    try:
        redis_client.set(WIDGET_SUMMARY_KEY, json.dumps(snapshot_as_json_dict(snapshot)))
    except redis.RedisError as e:
        logger.error(f"Error pushing widget summary to redis: {repr(e)}")
        return False

    logger.info(
        f"Widget summary synced: {len(snapshot.journaled_days)} days, "
        f"{snapshot.total_entries} total entries, {snapshot.current_streak} streak"
    )
    return True


def read_summary(redis_client: redis.Redis) -> Optional[SummarySnapshot]:
    """
    Widget side: the last published snapshot, or None if there is none or it is unreadable.
    """
    try:
        raw = redis_client.get(WIDGET_SUMMARY_KEY)
    except redis.RedisError as e:
        logger.error(f"Error reading widget summary from redis: {repr(e)}")
        return None
    if raw is None:
        return None

    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return SummarySnapshot(**json.loads(raw))
    except (TypeError, ValueError) as e:
        logger.error(f"Could not decode widget summary: {repr(e)}")
        return None


def sync_widget(
    db_session: Session,
    now: Optional[datetime] = None,
    redis_client: Optional[redis.Redis] = None,
) -> SummarySnapshot:
    """
    Exports the summary and publishes it when a widget channel is configured.
    """
    snapshot = export_summary(db_session, now)

    if redis_client is None:
        redis_client = db.redis_connection()
    if redis_client is None:
        logger.debug("Widget channel is not configured, skipping publish")
        return snapshot

    publish_summary(redis_client, snapshot)
    return snapshot


def sync_widget_from_env(now: Optional[datetime] = None) -> None:
    """
    Background task run after journal writes, with its own database session.
    """
    with db.yield_connection_from_env_ctx() as db_session:
        sync_widget(db_session, now)
