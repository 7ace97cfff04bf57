"""Command-line interface for the rating sync application."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..config import Config, ConfigError
from ..core.sync import RatingSyncOrchestrator
from ..utils.logging_config import (
    LOG_LEVELS,
    configure_third_party_loggers,
    setup_logging,
)
from .display import display_sync_summary

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--dry-run",
    is_flag=True,
    help="Simulate the sync without performing any changes",
)
@click.option(
    "--overwrite-existing",
    is_flag=True,
    help="Replace existing Plex ratings with Apple Music ratings",
)
@click.option(
    "--section",
    help="Key of the Plex music library section (default: RATESYNC_SECTION_KEY)",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Set logging level",
)
@click.option("--log-file", type=click.Path(path_type=Path), help="Log to file")
def cli(
    dry_run: bool,
    overwrite_existing: bool,
    section: Optional[str],
    log_level: str,
    log_file: Optional[Path],
) -> None:
    """Copy track ratings from Apple Music to Plex.

    \b
    Expects the following environment variables to be set:
      PLEX_API_URL   origin of your Plex server, e.g. "http://192.168.1.100:32400"
      PLEX_API_TOKEN your user's Plex session token
    """
    setup_logging(log_level=log_level, log_file=log_file)
    configure_third_party_loggers()

    try:
        options = Config().to_sync_options(
            dry_run=dry_run,
            override_existing=overwrite_existing,
            section_key=section or "",
        )
    except ConfigError as e:
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    orchestrator = RatingSyncOrchestrator.from_options(options)
    try:
        stats = orchestrator.run()
    except KeyboardInterrupt:
        logger.warning("Sync cancelled by user")
        sys.exit(130)
    except Exception:
        # Details were already logged by the orchestrator
        sys.exit(1)

    display_sync_summary(stats, dry_run=options.dry_run)


if __name__ == "__main__":
    cli()
