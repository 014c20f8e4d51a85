from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Tests import `simrec` from the checkout, installed or not.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from simrec.data import sample_ratings  # noqa: E402


@pytest.fixture()
def ratings() -> dict[str, dict[str, float]]:
    return sample_ratings()
