# ICC reference white (PCS illuminant), XYZ with Y normalised to 1
D50_WHITE_POINT = (0.9642, 1.0, 0.8249)

# header layout
HEADER_DEVICE_CLASS_OFFSET = 0x0C
HEADER_COLOR_SPACE_OFFSET = 0x10
HEADER_MAGIC_OFFSET = 0x24
TAG_COUNT_OFFSET = 0x80
TAG_TABLE_OFFSET = 0x84
TAG_RECORD_SIZE = 12

ICC_MAGIC = "acsp"
DISPLAY_CLASS = "mntr"
RGB_XYZ_SPACES = "RGB XYZ "

# tag and type signatures
CURVE_TYPE = "curv"
XYZ_TYPE = "XYZ "
LUT16_TYPE = "mft2"
A2B1_TAG = "A2B1"
VCGT_TAG = "vcgt"
REQUIRED_MATRIX_TAGS = frozenset(["rXYZ", "gXYZ", "bXYZ", "rTRC", "gTRC", "bTRC"])
CHANNELS = "rgb"

# sample scales
U16_SCALE = 65535
CIEXYZ16_SCALE = 32768
