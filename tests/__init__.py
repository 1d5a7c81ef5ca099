"""Test suite for referr."""

import sys
from pathlib import Path

# Make ``referr`` importable without installing the package
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
