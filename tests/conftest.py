"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.deal_inputs import (
    get_all_cash_deal,
    get_default_deal,
    get_default_form_fields,
    get_golden_deal,
)


@pytest.fixture
def default_deal():
    """Default deal: standard promote, 3-year interest-only loan."""
    return get_default_deal()


@pytest.fixture
def golden_deal():
    """Hand-checkable deal: 8% pref then 80/20."""
    return get_golden_deal()


@pytest.fixture
def all_cash_deal():
    """Golden deal without debt."""
    return get_all_cash_deal()


@pytest.fixture
def default_form_fields():
    """Form fields equivalent to the default deal."""
    return get_default_form_fields()
