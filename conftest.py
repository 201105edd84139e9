"""
Pytest configuration for test discovery and imports.

Ensures src/ is on sys.path so tests can import modules directly, and
isolates tests from the CI runner's own environment.
"""

import os
import sys

import pytest

ROOT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


@pytest.fixture(autouse=True)
def clean_ci_environment(monkeypatch):
    """Hide runner variables and action inputs the tests did not set."""
    for name in list(os.environ):
        if name.startswith("INPUT_"):
            monkeypatch.delenv(name)
    for name in ("GITHUB_ACTIONS", "GITHUB_OUTPUT", "GITHUB_SHA", "RUNNER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
