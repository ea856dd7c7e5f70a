"""Flask CLI commands.

Usage examples:
    flask seed-challenges
    flask dispatch-outbox --once
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext


@click.command("seed-challenges")
@with_appcontext
def seed_challenges_command():
    """Install the default wellness challenge catalogue (idempotent)."""
    from reflectai.domains.challenges.services.challenge_service import seed_default_challenges

    added = seed_default_challenges()
    click.echo(f"Seeded {added} challenge(s)")


@click.command("dispatch-outbox")
@click.option("--once", is_flag=True, help="Process a single batch and exit")
@click.option("--batch-size", type=int, default=None, help="Override OUTBOX_BATCH_SIZE")
@with_appcontext
def dispatch_outbox_command(once: bool, batch_size: int | None):
    """Deliver pending outbox events to in-process subscribers."""
    from reflectai.platform.outbox import EventBusAdapter
    from reflectai.platform.worker.config import DispatchConfig
    from reflectai.platform.worker.dispatcher import process_ready_batch, run_dispatcher

    config = DispatchConfig.from_env()
    if batch_size:
        config.batch_size = batch_size
    if once:
        processed = process_ready_batch(EventBusAdapter().dispatch, config)
        click.echo(f"Processed {processed} outbox message(s)")
        return
    run_dispatcher(config)


def register_commands(app):
    app.cli.add_command(seed_challenges_command)
    app.cli.add_command(dispatch_outbox_command)
