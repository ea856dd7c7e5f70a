"""Outbox dispatcher: claim ready rows, deliver them and apply retry backoff."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from reflectai.extensions import db
from reflectai.platform.outbox.models import CLAIMABLE_STATUSES, OutboxMessage
from reflectai.platform.outbox.services import EventBusAdapter
from reflectai.platform.worker.config import DispatchConfig

logger = logging.getLogger(__name__)

SendFn = Callable[[OutboxMessage], None]


def backoff_delay(attempts: int, config: DispatchConfig) -> float:
    """Seconds to wait before the next attempt; attempts is 1-indexed."""
    return config.backoff_seconds * (config.backoff_multiplier ** max(attempts - 1, 0))


def claim_ready_messages(session, batch_size: int, now: Optional[datetime] = None) -> List[OutboxMessage]:
    """Lock ready rows (SKIP LOCKED where supported) and move them to 'sending'."""
    now = now or datetime.utcnow()
    messages = (
        session.query(OutboxMessage)
        .filter(
            OutboxMessage.available_at <= now,
            OutboxMessage.status.in_(CLAIMABLE_STATUSES),
        )
        .order_by(OutboxMessage.available_at, OutboxMessage.id)
        .with_for_update(skip_locked=True)
        .limit(batch_size)
        .all()
    )
    for message in messages:
        message.claim()
    return messages


def _record_failure(message: OutboxMessage, exc: Exception, config: DispatchConfig) -> None:
    attempts = message.attempts or 1
    retry_at = datetime.utcnow() + timedelta(seconds=backoff_delay(attempts, config))
    message.mark_failed(str(exc), retry_at, give_up=attempts >= config.max_attempts)


def process_ready_batch(send_fn: SendFn, config: DispatchConfig, session=None) -> int:
    """Deliver one batch; returns how many rows were attempted."""
    session = session or db.session
    try:
        messages = claim_ready_messages(session, batch_size=config.batch_size)
        processed = 0
        for message in messages:
            try:
                send_fn(message)
            except Exception as exc:  # delivery errors are recorded on the row
                logger.warning("Outbox message %s (%s) failed: %s", message.id, message.event_type, exc)
                _record_failure(message, exc, config)
            else:
                message.mark_sent()
            processed += 1
        session.commit()
        return processed
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Database error while processing outbox batch")
        return 0


def run_dispatcher(config: Optional[DispatchConfig] = None, send_fn: Optional[SendFn] = None) -> None:
    """Poll forever, publishing to the in-process bus unless send_fn is given."""
    cfg = config or DispatchConfig.from_env()
    deliver = send_fn or EventBusAdapter().dispatch
    logger.info(
        "Starting outbox dispatcher (batch_size=%s, poll_interval=%ss, max_attempts=%s)",
        cfg.batch_size,
        cfg.poll_interval,
        cfg.max_attempts,
    )
    try:
        while True:
            if process_ready_batch(deliver, cfg) == 0:
                time.sleep(cfg.poll_interval)
    except KeyboardInterrupt:
        logger.info("Dispatcher stopped")
