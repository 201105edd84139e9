"""
CI workflow integration: log groups, step outputs and failure reporting.
"""

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


@contextmanager
def group(title: str) -> Iterator[None]:
    """
    Fold the enclosed log output under a collapsible group.

    Outside GitHub Actions the group is rendered as a banner.
    """
    if in_github_actions():
        sys.stdout.write(f"::group::{title}\n")
        sys.stdout.flush()
    else:
        logger.info("=" * 70)
        logger.info(title)
        logger.info("=" * 70)
    try:
        yield
    finally:
        if in_github_actions():
            sys.stdout.flush()
            sys.stdout.write("::endgroup::\n")
            sys.stdout.flush()


def set_output(name: str, value: str) -> None:
    """
    Publish a step output.

    Uses the heredoc form of the GITHUB_OUTPUT file so values may span
    lines.

    Args:
        name: Output name as declared in action.yml
        value: Output value
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.info(f"Output {name}={value}")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError(f"Unexpected input: value contains delimiter {delimiter}")

    with open(output_file, "a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_failed(message: str) -> int:
    """Report the invocation as failed and return the process exit code."""
    logger.error(message)
    return 1
