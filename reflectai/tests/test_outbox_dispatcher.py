from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Query

pytestmark = pytest.mark.integration

from reflectai.core.events.event_bus import EventBus
from reflectai.core.events.event_models import EventRecord
from reflectai.extensions import db
from reflectai.platform.outbox import EventBusAdapter, enqueue
from reflectai.platform.outbox.models import OutboxMessage
from reflectai.platform.worker import dispatcher
from reflectai.platform.worker.config import DispatchConfig


def _config(**overrides) -> DispatchConfig:
    defaults = {
        "batch_size": 5,
        "poll_interval": 0,
        "max_attempts": 2,
        "backoff_seconds": 3,
        "backoff_multiplier": 2,
    }
    defaults.update(overrides)
    return DispatchConfig(**defaults)


def _enqueue(user_id: int | None = None, event_type: str = "test.event", available_at: datetime | None = None) -> OutboxMessage:
    msg = enqueue(
        event_type,
        {"hello": "world"},
        user_id=user_id,
        available_at=available_at or datetime.utcnow() - timedelta(seconds=1),
    )
    db.session.commit()
    return msg


def test_successful_dispatch_marks_sent_and_increments_attempts(app):
    msg = _enqueue()
    sent_ids: list[int] = []

    processed = dispatcher.process_ready_batch(lambda m: sent_ids.append(m.id), _config())

    db.session.refresh(msg)
    assert processed == 1
    assert sent_ids == [msg.id]
    assert msg.status == "sent"
    assert msg.attempts == 1
    assert msg.last_error is None


def test_future_messages_are_not_claimed(app):
    later = _enqueue(available_at=datetime.utcnow() + timedelta(hours=1))

    processed = dispatcher.process_ready_batch(lambda m: None, _config())

    db.session.refresh(later)
    assert processed == 0
    assert later.status == "pending"


def test_claim_ready_messages_uses_skip_locked_and_reserves_once(app, monkeypatch):
    first = _enqueue()
    second = _enqueue(event_type="another.event")

    skip_locked_flags: list[bool | None] = []
    original_with_for_update = Query.with_for_update

    def _wrapped_with_for_update(self, *args, **kwargs):
        skip_locked_flags.append(kwargs.get("skip_locked"))
        return original_with_for_update(self, *args, **kwargs)

    monkeypatch.setattr(Query, "with_for_update", _wrapped_with_for_update)

    claimed = dispatcher.claim_ready_messages(db.session, batch_size=1)
    db.session.commit()
    assert {m.id for m in claimed} == {first.id}
    assert claimed[0].status == "sending"

    claimed_second = dispatcher.claim_ready_messages(db.session, batch_size=2)
    db.session.commit()
    claimed_ids = {m.id for m in claimed_second}
    assert first.id not in claimed_ids
    assert second.id in claimed_ids
    assert True in skip_locked_flags


def test_failed_dispatch_applies_backoff_and_honors_max_attempts(app):
    msg = _enqueue()
    cfg = _config(max_attempts=2, backoff_seconds=4, backoff_multiplier=2)

    def _send_fail(_):
        raise RuntimeError("boom")

    start = datetime.utcnow()
    dispatcher.process_ready_batch(_send_fail, cfg)
    db.session.refresh(msg)
    assert msg.attempts == 1
    assert msg.status == "retry"
    assert msg.available_at >= start + timedelta(seconds=cfg.backoff_seconds)
    assert msg.last_error == "boom"
    first_available = msg.available_at

    msg.available_at = datetime.utcnow() - timedelta(seconds=1)
    db.session.commit()

    dispatcher.process_ready_batch(_send_fail, cfg)
    db.session.refresh(msg)
    assert msg.attempts == 2
    assert msg.status == "failed"
    assert msg.available_at >= first_available - timedelta(seconds=1)


def test_backoff_delay_grows_geometrically():
    cfg = _config(backoff_seconds=5, backoff_multiplier=2)
    assert [dispatcher.backoff_delay(n, cfg) for n in (1, 2, 3)] == [5, 10, 20]


def test_already_sent_message_is_not_dispatched_twice(app):
    msg = _enqueue()
    sent_ids: list[int] = []

    dispatcher.process_ready_batch(lambda m: sent_ids.append(m.id), _config())

    def _should_not_run(_):
        raise AssertionError("duplicate dispatch attempted")

    dispatcher.process_ready_batch(_should_not_run, _config())
    db.session.refresh(msg)
    assert sent_ids == [msg.id]
    assert msg.status == "sent"


def test_event_bus_adapter_publishes_record(app):
    bus = EventBus()
    received = []
    bus.subscribe("test.event", received.append)
    msg = _enqueue()

    dispatcher.process_ready_batch(EventBusAdapter(bus).dispatch, _config())

    assert len(received) == 1
    assert received[0].event_type == "test.event"
    assert received[0].payload == {"hello": "world", "event_id": msg.id}


@pytest.mark.unit
def test_event_bus_ignores_duplicate_subscriptions():
    bus = EventBus()
    received = []
    bus.subscribe_many({"a.event": received.append})
    bus.subscribe("a.event", received.append)

    delivered = bus.publish(EventRecord(event_type="a.event"))

    assert delivered == 1
    assert len(received) == 1
    assert bus.publish(EventRecord(event_type="unrouted.event")) == 0


@pytest.mark.unit
def test_event_record_owner_falls_back_to_payload():
    assert EventRecord("x", payload={"user_id": "7"}).owner_id == 7
    assert EventRecord("x", payload={"user_id": 7}, user_id=3).owner_id == 3
    assert EventRecord("x").owner_id is None


@pytest.mark.unit
def test_dispatch_config_reads_prefixed_environment():
    cfg = DispatchConfig.from_env({"OUTBOX_BATCH_SIZE": "7", "OUTBOX_BACKOFF_SECONDS": "1.5", "OUTBOX_MAX_ATTEMPTS": ""})

    assert cfg.batch_size == 7
    assert cfg.backoff_seconds == 1.5
    assert cfg.max_attempts == 5
    with pytest.raises(ValueError):
        DispatchConfig(batch_size=0)


def test_failed_message_never_moves_availability_backwards(app):
    msg = _enqueue(available_at=datetime.utcnow() + timedelta(hours=2))
    later = msg.available_at

    msg.claim()
    msg.mark_failed("boom", retry_at=datetime.utcnow(), give_up=False)

    assert msg.attempts == 1
    assert msg.status == "retry"
    assert msg.available_at == later
