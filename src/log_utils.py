"""
Logging utilities for the agent cloud deployer.
"""

import logging
import os
import sys
from typing import Optional

WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class WorkflowCommandFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands.

    DEBUG, WARNING and ERROR records become ::debug::, ::warning:: and
    ::error:: annotations; INFO records are printed as plain lines.
    """

    def __init__(self) -> None:
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow command data must be single-line
        escaped = (
            message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        )
        return f"::{command}::{escaped}"


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose (DEBUG) logging; also enabled when the
            runner has step debug logging turned on (RUNNER_DEBUG=1)
        log_file: Optional path to a log file

    Returns:
        Logger instance
    """
    level = (
        logging.DEBUG
        if verbose or os.environ.get("RUNNER_DEBUG") == "1"
        else logging.INFO
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    if os.environ.get("GITHUB_ACTIONS") == "true":
        stream_handler.setFormatter(WorkflowCommandFormatter())
    else:
        stream_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )

    handlers = [stream_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # urllib3/docker connection chatter is not useful even in verbose mode
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)

    return logging.getLogger(__name__)
