"""Global test fixtures for gamedo tests"""
import pytest

from tests.factories import FIXED_NOW


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed 'current time' injected into the engine"""
    return FIXED_NOW


@pytest.fixture
def today(now):
    return now.date()
