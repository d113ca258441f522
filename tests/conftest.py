# tests/conftest.py
import pytest
from quantmath.units.registry import DEFAULT_REGISTRY as _ureg



@pytest.fixture(scope="session")
def ureg():
    return _ureg
