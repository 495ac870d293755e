import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def items():
    """Twenty-five items with ids 1..25."""
    return [{"id": i, "name": f"item-{i}", "group": "odd" if i % 2 else "even"} for i in range(1, 26)]
