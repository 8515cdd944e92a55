#!/usr/bin/env python3
"""
Command line entry point: run the API server and manage the database schema.
"""

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path

import click
import uvicorn
from alembic import command
from alembic.config import Config

from blogexpress import __version__
from blogexpress.logging import configure_logging, get_logger

logger = get_logger(__name__)

PROJECT_DIR = Path(__file__).resolve().parents[2]

LOG_LEVELS = click.Choice(["debug", "info", "warning", "error"])


@click.group()
@click.version_option(version=__version__, prog_name="blogexpress")
def cli() -> None:
    """BlogExpress CLI - run the API server and manage the database."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8080, type=int, help="Port to bind to (default: 8080)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option("--log-level", default="info", type=LOG_LEVELS, help="Log level (default: info)")
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the BlogExpress API server."""
    configure_logging(debug=(log_level == "debug"))

    # Reloader and worker processes import the app afresh and read settings from env
    os.environ["BLOGEXPRESS_DEBUG"] = "true" if log_level == "debug" else "false"
    os.environ["BLOGEXPRESS_LOG_LEVEL"] = log_level

    logger.info("Starting BlogExpress API server", host=host, port=port, workers=workers)

    # uvicorn needs an import string for reload or more than one worker
    target = "blogexpress.api.app:app"
    if not reload and workers == 1:
        from blogexpress.api.app import app as target

    try:
        uvicorn.run(
            target,
            host=host,
            port=port,
            reload=reload,
            workers=1 if reload else workers,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")


@cli.group()
@click.option("--log-level", default="info", type=LOG_LEVELS, help="Log level (default: info)")
def db(log_level: str) -> None:
    """Manage the database schema."""
    configure_logging(debug=(log_level == "debug"))


def alembic_config() -> Config:
    """Alembic configuration for this checkout, with paths made absolute."""
    ini_path = PROJECT_DIR / "alembic.ini"
    if not ini_path.exists():
        raise click.ClickException(f"alembic.ini not found at {ini_path}")

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    return config


def run_alembic(description: str, operation: Callable[[Config], object], **log_fields) -> None:
    """Run one alembic command, exiting non-zero when it fails."""
    config = alembic_config()
    logger.info(f"{description} started", **log_fields)
    try:
        operation(config)
    except Exception as e:
        logger.error(f"{description} failed", error=str(e), **log_fields)
        sys.exit(1)
    logger.info(f"{description} finished", **log_fields)


@db.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    run_alembic("Upgrade", lambda cfg: command.upgrade(cfg, revision), revision=revision)


@db.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    run_alembic("Downgrade", lambda cfg: command.downgrade(cfg, revision), revision=revision)


@db.command()
def current() -> None:
    """Show the revision the database is at."""
    run_alembic("Current revision lookup", command.current)


@db.command()
def history() -> None:
    """List every migration."""
    run_alembic("History listing", command.history)


@db.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff against the models")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration file."""
    run_alembic(
        "Revision",
        lambda cfg: command.revision(cfg, message=message, autogenerate=autogenerate),
        message=message,
    )


@db.command("create-tables")
def create_tables_command() -> None:
    """Create every table straight from the models, bypassing migrations."""
    from blogexpress.database.connection import create_tables, dispose_database, init_database

    async def do_create() -> None:
        init_database()
        try:
            await create_tables()
        finally:
            await dispose_database()

    asyncio.run(do_create())
    click.echo("✓ Tables created")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
