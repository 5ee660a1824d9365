import numpy as np
import pytest
from numpy.testing import assert_allclose

from icc_builder import build_profile, matrix_trc_tags, vcgt_tag
from icc_errors import UnsupportedChannelCount, UnsupportedEntrySize, UnsupportedVCGTType
from icc_matrix_profile import parse_profile


def _profile(M, vcgt):
    return parse_profile(build_profile(matrix_trc_tags(M) + [("vcgt", vcgt)]))


def test_16_bit_table(srgb_matrix):
    channels = [[0, 32768, 65535], [0, 16384, 65535], [0, 49152, 65535]]
    profile = _profile(srgb_matrix, vcgt_tag(channels, entry_size=2))
    assert len(profile.vcgt) == 3
    assert_allclose(profile.vcgt[1].values, channels[1])
    assert profile.vcgt[1].sample(0.5) == pytest.approx(16384 / 65535)
    assert profile.vcgt[2].sample(1.0) == 1.0


def test_8_bit_table_is_widened(srgb_matrix):
    channels = [[0, 128, 255]] * 3
    profile = _profile(srgb_matrix, vcgt_tag(channels, entry_size=1))
    for curve in profile.vcgt:
        assert curve.type == "curve"
        assert curve.values.tolist() == [0, 32896, 65535]


def test_vcgt_before_matrix_tags(srgb_matrix):
    ramp = [np.arange(16) * 4369] * 3
    tags = [("vcgt", vcgt_tag(ramp))] + matrix_trc_tags(srgb_matrix)
    profile = parse_profile(build_profile(tags))
    assert profile.vcgt[0].sample(0.2) == pytest.approx(0.2)


def test_entry_size_4_is_unsupported(srgb_matrix):
    with pytest.raises(UnsupportedEntrySize):
        _profile(srgb_matrix, vcgt_tag([[0, 1], [0, 1], [0, 1]], entry_size=4))


def test_formula_type_is_unsupported(srgb_matrix):
    with pytest.raises(UnsupportedVCGTType):
        _profile(srgb_matrix, vcgt_tag([[0, 65535]] * 3, gamma_type=1))


def test_single_channel_is_unsupported(srgb_matrix):
    with pytest.raises(UnsupportedChannelCount):
        _profile(srgb_matrix, vcgt_tag([[0, 65535]], channels=1))
