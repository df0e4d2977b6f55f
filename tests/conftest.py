import pytest

from braillegcode.languages import load_language
from braillegcode.structures import DeviceGeometry


@pytest.fixture
def six_dot():
    return load_language("6 dots")


@pytest.fixture
def eight_dot():
    return load_language("8 dots")


@pytest.fixture
def geometry():
    return DeviceGeometry()
