#!/usr/bin/env python3
"""
Agent Cloud Deploy: build an agent image and deploy it to the agent cloud.

Entry point for the container action and for running directly from a source
checkout. The modules live flat under src/, which is put on sys.path so they
import without installation. For regular use, prefer installing the project
and using the `agent-cloud-deploy` console script.
"""

import os
import sys

# Add src/ to path to import modules directly
REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main

if __name__ == "__main__":
    sys.exit(main())
