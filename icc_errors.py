class ICCProfileError(ValueError):
    """Base class for every failure while decoding a display profile."""


# structure
class NotAnICCProfile(ICCProfileError):
    pass


class NotADisplayProfile(ICCProfileError):
    pass


class NotRGBXYZProfile(ICCProfileError):
    pass


class TruncatedProfile(ICCProfileError):
    pass


class TagOutOfBounds(ICCProfileError):
    pass


# tag types
class NotCurveType(ICCProfileError):
    pass


class NotXYZType(ICCProfileError):
    pass


class NotLut16Type(ICCProfileError):
    pass


class ChannelCountMismatch(ICCProfileError):
    pass


class MissingRequiredTags(ICCProfileError):
    pass


class DegenerateMatrix(ICCProfileError):
    pass


# vcgt
class UnsupportedVCGTType(ICCProfileError):
    pass


class UnsupportedChannelCount(ICCProfileError):
    pass


class UnsupportedEntrySize(ICCProfileError):
    pass
