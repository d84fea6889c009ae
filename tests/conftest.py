import sys
from pathlib import Path

import pytest

# Add project root so `import issuance`, `import ledger`, ... work in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from issuance.controller import InflationToken  # noqa: E402


@pytest.fixture
def owner():
    return "0x" + "a" * 40


@pytest.fixture
def token(owner):
    # 2% inflation target
    return InflationToken(inflation_target=2, deployer=owner)
