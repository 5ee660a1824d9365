import numpy as np
import pytest

from convert_utils import xyY_to_XYZ
from matrix import scale_to_white
from meta_data import D50_WHITE_POINT

SRGB_PRIMARIES_XY = [(0.64, 0.33), (0.30, 0.60), (0.15, 0.06)]


@pytest.fixture
def d50():
    return np.array(D50_WHITE_POINT)


@pytest.fixture
def srgb_matrix():
    """sRGB primaries scaled so that RGB (1,1,1) is exactly D50."""
    M0 = np.column_stack([xyY_to_XYZ([x, y, 1.0]) for x, y in SRGB_PRIMARIES_XY])
    return scale_to_white(M0, D50_WHITE_POINT)


@pytest.fixture
def native_matrix():
    """Colorants whose white is D65-ish rather than D50, as a display profile may store them."""
    M0 = np.column_stack([xyY_to_XYZ([x, y, 1.0]) for x, y in SRGB_PRIMARIES_XY])
    return scale_to_white(M0, (0.9505, 1.0, 1.089))
