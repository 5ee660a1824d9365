import struct

from icc_errors import TruncatedProfile


class ICCBinaryReader:
    """
    Big-endian reader over a fully buffered profile.
    Every read advances an explicit cursor; seek() moves it to an absolute offset.
    """

    def __init__(self, data):
        self.data = bytes(data)
        self.pos = 0

    def __len__(self):
        return len(self.data)

    def seek(self, offset):
        if offset < 0 or offset > len(self.data):
            raise TruncatedProfile(f"seek to 0x{offset:x} outside profile of {len(self.data)} bytes")
        self.pos = offset

    def tell(self):
        return self.pos

    def _take(self, n):
        end = self.pos + n
        if end > len(self.data):
            raise TruncatedProfile(f"read of {n} bytes at 0x{self.pos:x} runs past end of profile")
        raw = self.data[self.pos:end]
        self.pos = end
        return raw

    def _unpack(self, fmt, n):
        return struct.unpack(fmt, self._take(n))[0]

    def skip(self, n):
        self._take(n)

    def read_chars(self, n):
        return self._take(n).decode('latin-1')

    def read_u8(self):
        return self._unpack('>B', 1)

    def read_u16(self):
        return self._unpack('>H', 2)

    def read_u32(self):
        return self._unpack('>I', 4)

    def read_u8_array(self, count):
        return tuple(self._take(count))

    def read_u16_array(self, count):
        if count == 0:
            return ()
        raw = self._take(2 * count)
        return struct.unpack('>%dH' % count, raw)

    def read_s15fixed16(self) -> float:
        return self._unpack('>i', 4) / 65536.0

    def read_u8fixed8(self) -> float:
        return self._unpack('>H', 2) / 256.0

    def read_cie_xyz(self) -> float:
        # lut16 PCS encoding: 1.0 == 0x8000
        return self._unpack('>H', 2) / 32768.0
