"""CLI configuration overrides for runtime tunables.

Resolves settings that may come from CLI flags or the environment, CLI
first, and sets up logging accordingly.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

from common.logging_utils import configure_logging
from constants import Constants
from registry.digest import CommandDigestFetcher, StaticDigestFetcher

logger = logging.getLogger(__name__)


def setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    level_name = getattr(args, "LOG_LEVEL", None)
    if level_name:
        os.environ[Constants.ENV_LOG_LEVEL] = str(level_name).upper()

    configure_logging()

    # Ensure the CLI flag wins over an earlier configuration
    if level_name:
        logging.getLogger().setLevel(getattr(logging, str(level_name).upper(), logging.INFO))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def get_digest_command(args: Any) -> Optional[str]:
    """Get the digest command from the sources in priority order.

    Priority:
    1. CLI argument ``--digest-command``
    2. Environment variable IMAGEPOLICY_DIGEST_COMMAND

    Returns:
        Command template or None if not configured.
    """
    cli_command = getattr(args, "DIGEST_COMMAND", None)
    if cli_command and cli_command.strip():
        return cli_command.strip()

    env_command = os.environ.get(Constants.ENV_DIGEST_COMMAND)
    if env_command and env_command.strip():
        return env_command.strip()

    return None


def build_digest_lookup(args: Any) -> Optional[Callable[[str, str], str]]:
    """Build the digest lookup selected by CLI arguments and environment.

    A fixed ``--digest`` value takes precedence over a digest command.
    """
    digest = getattr(args, "DIGEST", None)
    if digest:
        return StaticDigestFetcher(digest.strip())

    command = get_digest_command(args)
    if command:
        logger.debug("Using digest command: %s", command)
        return CommandDigestFetcher(command)

    return None
