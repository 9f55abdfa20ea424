import sys
from pathlib import Path

import pytest

# make `src` importable without installing the package
SRC = Path(__file__).resolve().parents[1] / 'src'
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from virtual_mirror.models import AvatarAttributes, BodyMeasurements  # noqa: E402


@pytest.fixture
def avatar():
    return AvatarAttributes(body_shape='masculine', body_type='fit', height=170, weight=70)


@pytest.fixture
def neutral_avatar():
    """175 cm / 95 kg: height scale and mass factor are exactly 1.0."""
    return AvatarAttributes(body_shape='masculine', body_type='fit', height=175, weight=95)


@pytest.fixture
def neutral_measurements():
    """100 cm everywhere: every torso region scale is exactly 1.0."""
    return BodyMeasurements(chest=100, waist=100, hips=100)
