# tests/conftest.py
from __future__ import annotations

import pytest

from functions.orchestrator.tier_catalog import TierCatalog
from functions.utils.settings import DEFAULT_TIER_CATALOG


@pytest.fixture
def catalog() -> TierCatalog:
    return TierCatalog.from_names(DEFAULT_TIER_CATALOG)
