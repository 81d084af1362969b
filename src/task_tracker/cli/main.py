# src/task_tracker/cli/main.py

"""
CLI entrypoint.

One invocation runs exactly one command:
load settings -> set up logging -> build AppState -> first-run init -> dispatch -> exit.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state, initialize_files
from ..cli.commands import registry
from ..config import Settings, load_settings
from ..errors import EXIT_CONFIG, ConfigError, StorageError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None, *, settings: Settings | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if settings is None:
        settings = load_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    try:
        setup_logging(
            log_dir=settings.data_dir,
            console_level=console_level,
            log_to_file=settings.log_to_file,
        )
    except OSError as exc:
        print(
            f"Fatal configuration error: cannot write logs to {settings.data_dir}: {exc.strerror or exc}",
            file=sys.stderr,
        )
        return EXIT_CONFIG

    logger.debug("Starting %s with argv=%s", settings.app_name, list(argv[:1]))

    try:
        settings.validate()
        state = create_initial_state(settings=settings)
        initialize_files(state)
    except ConfigError as exc:
        logger.debug("Fatal configuration error: %s", exc.message)
        print(f"Fatal configuration error: {exc.message}", file=sys.stderr)
        return exc.exit_code
    except StorageError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return exc.exit_code

    return registry.dispatch(state, argv)


def run() -> None:
    """Console-script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":
    run()
