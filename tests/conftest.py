"""Test setup for uplang."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

EXAMPLES = Path(__file__).resolve().parent / "examples"


@pytest.fixture
def read_example():
    """Return the text of a file in tests/examples."""

    def _read(name: str) -> str:
        return (EXAMPLES / name).read_text(encoding="utf-8")

    return _read
