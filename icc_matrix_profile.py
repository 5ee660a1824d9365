import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from convert_utils import XYZ_to_xy
from icc_errors import (
    ChannelCountMismatch, DegenerateMatrix, ICCProfileError, MissingRequiredTags,
    NotADisplayProfile, NotAnICCProfile, NotCurveType, NotLut16Type, NotRGBXYZProfile,
    NotXYZType, TagOutOfBounds, TruncatedProfile, UnsupportedChannelCount,
    UnsupportedEntrySize, UnsupportedVCGTType,
)
from icc_reader import ICCBinaryReader
from matrix import SingularMatrixError, column, inverse_3x3, scale_to_white, xyz_scale_to_d50
from meta_data import (
    A2B1_TAG, CHANNELS, CIEXYZ16_SCALE, CURVE_TYPE, D50_WHITE_POINT, DISPLAY_CLASS,
    HEADER_COLOR_SPACE_OFFSET, HEADER_DEVICE_CLASS_OFFSET, HEADER_MAGIC_OFFSET,
    ICC_MAGIC, LUT16_TYPE, REQUIRED_MATRIX_TAGS, RGB_XYZ_SPACES, TAG_COUNT_OFFSET,
    TAG_RECORD_SIZE, TAG_TABLE_OFFSET, U16_SCALE, VCGT_TAG, XYZ_TYPE,
)
from tone_curve import ToneCurve

logger = logging.getLogger(__name__)

TagRecord = namedtuple("TagRecord", ["signature", "offset", "size"])

CHANNEL_NAMES = ("red", "green", "blue")


@dataclass(frozen=True, eq=False)
class ColorProfile:
    """
    Display model decoded from an ICC profile.
      matrix: linear RGB -> XYZ, adapted so that RGB (1,1,1) is D50; columns are R, G, B
      trcs:   device code -> linear light, R, G, B
      vcgt:   video card gamma table, R, G, B, or None
    """
    matrix: np.ndarray
    trcs: Tuple[ToneCurve, ToneCurve, ToneCurve]
    vcgt: Optional[Tuple[ToneCurve, ToneCurve, ToneCurve]] = None
    is_lut_based: bool = False

    def inverse_matrix(self):
        return inverse_3x3(self.matrix)

    def primaries_xy(self):
        return XYZ_to_xy([column(self.matrix, j) for j in range(3)])

    def white_xy(self):
        return XYZ_to_xy(self.matrix @ np.ones(3))

    def to_dict(self, samples=None):
        def curves(items):
            if items is None:
                return None
            out = {}
            for name, curve in zip(CHANNEL_NAMES, items):
                if samples:
                    out[name] = {'type': curve.type, 'values': curve.table(samples).tolist()}
                else:
                    out[name] = curve.to_dict()
            return out

        primaries = self.primaries_xy()
        return {
            'lut_based': self.is_lut_based,
            'matrix': self.matrix.tolist(),
            'white_xy': self.white_xy().tolist(),
            'primaries_xy': {name: primaries[i].tolist() for i, name in enumerate(CHANNEL_NAMES)},
            'trcs': curves(self.trcs),
            'vcgt': curves(self.vcgt),
        }


def _inverse(m, what):
    try:
        return inverse_3x3(m)
    except SingularMatrixError as e:
        raise DegenerateMatrix(f"{what}: {e}") from e


class _ProfileDecoder:
    """State of a single decode pass; a new one is made for every profile."""

    def __init__(self, data):
        self.reader = ICCBinaryReader(data)
        self.lut_mode = False
        self.matrix = np.zeros((3, 3))
        self.trcs = [None, None, None]
        self.vcgt = None
        self.seen_tags = set()

    def decode(self):
        self._validate_header()
        for record in self._tag_records():
            self._dispatch(record)

        if self.lut_mode:
            logger.info("decoded lut16 (A2B1) profile")
            matrix = self.matrix
        else:
            missing = REQUIRED_MATRIX_TAGS - self.seen_tags
            if missing:
                raise MissingRequiredTags(
                    "Missing required tags for curves + matrix profile: " + ", ".join(sorted(missing)))
            try:
                matrix = xyz_scale_to_d50(self.matrix)
            except SingularMatrixError as e:
                raise DegenerateMatrix(f"colorant matrix: {e}") from e
            logger.info("decoded matrix/TRC profile")

        matrix = np.array(matrix, dtype=np.float64)
        matrix.setflags(write=False)
        return ColorProfile(
            matrix=matrix,
            trcs=tuple(self.trcs),
            vcgt=self.vcgt,
            is_lut_based=self.lut_mode,
        )

    # ---------------- header / tag table ----------------
    def _validate_header(self):
        r = self.reader
        if len(r) < HEADER_MAGIC_OFFSET + 4:
            raise NotAnICCProfile("Not an ICC profile")
        r.seek(HEADER_MAGIC_OFFSET)
        if r.read_chars(4) != ICC_MAGIC:
            raise NotAnICCProfile("Not an ICC profile")

        r.seek(HEADER_DEVICE_CLASS_OFFSET)
        if r.read_chars(4) != DISPLAY_CLASS:
            raise NotADisplayProfile("Not a display device profile")

        r.seek(HEADER_COLOR_SPACE_OFFSET)
        if r.read_chars(8) != RGB_XYZ_SPACES:
            raise NotRGBXYZProfile("Not an RGB profile with XYZ PCS")

    def _tag_records(self):
        r = self.reader
        r.seek(TAG_COUNT_OFFSET)
        count = r.read_u32()
        if TAG_TABLE_OFFSET + count * TAG_RECORD_SIZE > len(r):
            raise TruncatedProfile(f"tag table of {count} entries runs past end of profile")
        logger.debug("tag table has %d entries", count)

        for i in range(count):
            r.seek(TAG_TABLE_OFFSET + TAG_RECORD_SIZE * i)
            record = TagRecord(r.read_chars(4), r.read_u32(), r.read_u32())
            if record.offset + record.size > len(r):
                raise TagOutOfBounds(
                    f"tag {record.signature!r} at 0x{record.offset:x} (+{record.size}) is outside the profile")
            yield record

    def _dispatch(self, record):
        sig = record.signature
        self.reader.seek(record.offset)
        channel = CHANNELS.find(sig[0])

        if sig == A2B1_TAG:
            logger.debug("tag %s: lut16 reduction", sig)
            self.lut_mode = True
            self._read_lut16(sig)
        elif sig.endswith("TRC") and not self.lut_mode and channel >= 0:
            logger.debug("tag %s: tone curve", sig)
            self.trcs[channel] = self._read_curve(sig)
            self.seen_tags.add(sig)
        elif sig.endswith("XYZ") and not self.lut_mode and channel >= 0:
            logger.debug("tag %s: colorant", sig)
            self.matrix[:, channel] = self._read_xyz(sig)
            self.seen_tags.add(sig)
        elif sig == VCGT_TAG:
            logger.debug("tag %s: video card gamma table", sig)
            self.vcgt = self._read_vcgt()
        else:
            logger.debug("tag %s: ignored", sig)

    # ---------------- matrix + TRC ----------------
    def _read_xyz(self, sig):
        r = self.reader
        if r.read_chars(4) != XYZ_TYPE:
            raise NotXYZType(f"{sig} is not of XYZType")
        r.skip(4)
        return [r.read_s15fixed16() for _ in range(3)]

    def _read_curve(self, sig):
        r = self.reader
        if r.read_chars(4) != CURVE_TYPE:
            raise NotCurveType(f"{sig} is not of curveType")
        r.skip(4)
        count = r.read_u32()
        if count == 0:
            return ToneCurve.from_gamma(1.0)
        if count == 1:
            return ToneCurve.from_gamma(r.read_u8fixed8())
        return ToneCurve.from_lut(r.read_u16_array(count), U16_SCALE)

    # ---------------- lut16 (mft2) ----------------
    def _read_lut16(self, sig):
        r = self.reader
        if r.read_chars(4) != LUT16_TYPE:
            raise NotLut16Type(f"{sig} is not of lut16Type")
        r.skip(4)

        input_channels = r.read_u8()
        output_channels = r.read_u8()
        if input_channels != 3 or output_channels != 3:
            raise ChannelCountMismatch(
                f"{sig} must have 3 input and 3 output channels, got {input_channels}/{output_channels}")
        grid_points = r.read_u8()
        r.skip(1)
        # e matrix, only used for XYZ input
        r.skip(9 * 4)

        input_entries = r.read_u16()
        output_entries = r.read_u16()
        if grid_points < 2 or input_entries < 2 or output_entries < 2:
            raise ICCProfileError(
                f"{sig} needs at least 2 grid points and table entries "
                f"(grid={grid_points}, input={input_entries}, output={output_entries})")

        inputs = np.array([r.read_u16_array(input_entries) for _ in range(3)], dtype=np.float64)

        clut_start = r.tell()
        primaries = self._clut_primaries(clut_start, grid_points)
        grayscale = self._clut_grayscale(clut_start, grid_points)

        r.seek(clut_start + 2 * 3 * grid_points ** 3)
        outputs = [ToneCurve.from_lut(r.read_u16_array(output_entries), U16_SCALE) for _ in range(3)]

        M = self._primaries_to_matrix(primaries, grayscale)
        Minv = _inverse(M, "lut16 primaries matrix")
        self.matrix = M
        self.trcs = self._neutral_axis_trcs(inputs, grayscale, outputs, Minv)

    def _clut_primaries(self, start, grid_points):
        """
        Read the grid nodes where one input is at full scale and the others are zero.
        The last input varies fastest, so stride grid**0 is blue and grid**2 is red.
        """
        r = self.reader
        primaries = [None, None, None]
        index = grid_points - 1
        for j in range(3):
            r.seek(start + 2 * 3 * index)
            primaries[2 - j] = np.array([r.read_cie_xyz() for _ in range(3)])
            index *= grid_points
        return primaries

    def _clut_grayscale(self, start, grid_points):
        r = self.reader
        tables = np.zeros((3, grid_points))
        diagonal_stride = grid_points * grid_points + grid_points + 1
        for i in range(grid_points):
            r.seek(start + 2 * 3 * i * diagonal_stride)
            tables[:, i] = r.read_u16_array(3)
        return [ToneCurve.from_lut(tables[k], CIEXYZ16_SCALE) for k in range(3)]

    @staticmethod
    def _primaries_to_matrix(primaries, grayscale):
        black = np.array([curve.sample(0.0) for curve in grayscale])

        M_prime = np.zeros((3, 3))
        for j in range(3):
            pure = primaries[j] - black
            if not pure[1] > 0:
                raise DegenerateMatrix(
                    f"{CHANNEL_NAMES[j]} primary has no luminance above black (Y={pure[1]})")
            M_prime[:, j] = pure / pure[1]

        try:
            return scale_to_white(M_prime, D50_WHITE_POINT)
        except SingularMatrixError as e:
            raise DegenerateMatrix(f"lut16 primaries matrix: {e}") from e

    @staticmethod
    def _neutral_axis_trcs(inputs, grayscale, outputs, Minv):
        """
        Walk the neutral axis: input curve -> grid diagonal -> output curve gives an
        XYZ-like value per input entry; Minv maps it back to per-channel linear light.
        """
        x = inputs / U16_SCALE
        values = np.array([outputs[k].sample(grayscale[k].sample(x[k])) for k in range(3)])
        trcs = np.maximum(Minv @ values, 0.0)
        trcs[:, -1] = 1.0
        return [ToneCurve.from_samples(trcs[k]) for k in range(3)]

    # ---------------- vcgt ----------------
    def _read_vcgt(self):
        r = self.reader
        r.skip(4)
        r.skip(4)
        gamma_type = r.read_u32()
        if gamma_type != 0:
            raise UnsupportedVCGTType("Only VCGT type 0 is supported")

        channels = r.read_u16()
        entries = r.read_u16()
        entry_size = r.read_u16()
        if channels != 3:
            raise UnsupportedChannelCount("Only VCGT with 3 channels is supported")
        if entry_size not in (1, 2):
            raise UnsupportedEntrySize("Only 8 and 16 bit VCGT is supported")

        curves = []
        for _ in range(3):
            if entry_size == 1:
                values = [v * U16_SCALE // 255 for v in r.read_u8_array(entries)]
            else:
                values = r.read_u16_array(entries)
            curves.append(ToneCurve.from_lut(values, U16_SCALE))
        return tuple(curves)


def parse_profile(data) -> ColorProfile:
    """Decode an in-memory ICC display profile."""
    return _ProfileDecoder(data).decode()


def load_profile(path) -> ColorProfile:
    with open(path, 'rb') as f:
        data = f.read()
    logger.info("loaded %s (%d bytes)", path, len(data))
    return parse_profile(data)
