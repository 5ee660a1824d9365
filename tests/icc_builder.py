"""Synthesise ICC display profiles for tests."""

import struct

import numpy as np


def s15fixed16(v):
    return struct.pack(">i", int(round(v * 65536)))


def pad4(block):
    return block + b"\x00" * ((4 - len(block) % 4) % 4)


def header(magic=b"acsp", device_class=b"mntr", spaces=b"RGB XYZ "):
    h = bytearray(128)
    h[0x0C:0x10] = device_class
    h[0x10:0x18] = spaces
    h[0x24:0x28] = magic
    return h


def build_profile(tags, **header_kwargs):
    """tags: list of (signature, payload) in directory order."""
    h = header(**header_kwargs)
    table = bytearray(struct.pack(">I", len(tags)))
    content = bytearray()
    offset = 128 + 4 + 12 * len(tags)
    for sig, payload in tags:
        payload = pad4(bytes(payload))
        table += sig.encode("ascii") + struct.pack(">II", offset, len(payload))
        content += payload
        offset += len(payload)
    data = h + table + content
    data[0:4] = struct.pack(">I", len(data))
    return bytes(data)


def xyz_tag(xyz, type_sig=b"XYZ "):
    return type_sig + b"\x00" * 4 + b"".join(s15fixed16(v) for v in xyz)


def curv_gamma(gamma, type_sig=b"curv"):
    return type_sig + b"\x00" * 4 + struct.pack(">IH", 1, int(round(gamma * 256)))


def curv_table(values, type_sig=b"curv"):
    values = [int(v) for v in values]
    return type_sig + b"\x00" * 4 + struct.pack(">I", len(values)) + struct.pack(">%dH" % len(values), *values)


def vcgt_tag(channels_values, entry_size=2, gamma_type=0, channels=None):
    if channels is None:
        channels = len(channels_values)
    entries = len(channels_values[0])
    block = b"vcgt" + b"\x00" * 4 + struct.pack(">IHHH", gamma_type, channels, entries, entry_size)
    fmt = {1: "B", 2: "H", 4: "I"}[entry_size]
    for values in channels_values:
        block += struct.pack(">%d%s" % (len(values), fmt), *[int(v) for v in values])
    return block


def matrix_trc_tags(M, gammas=(2.2, 2.2, 2.2)):
    M = np.asarray(M, dtype=float)
    tags = []
    for i, c in enumerate("rgb"):
        tags.append((c + "XYZ", xyz_tag(M[:, i])))
    for i, c in enumerate("rgb"):
        tags.append((c + "TRC", curv_gamma(gammas[i])))
    return tags


def mft2_tag(grid_points, clut, input_tables, output_tables,
             input_channels=3, output_channels=3, type_sig=b"mft2"):
    """clut: array (grid**3, 3) of uint16 in ICC order (first input varies slowest)."""
    input_tables = np.asarray(input_tables, dtype=int)
    output_tables = np.asarray(output_tables, dtype=int)
    block = bytearray(type_sig + b"\x00" * 4)
    block += struct.pack(">BBBB", input_channels, output_channels, grid_points, 0)
    for v in (1, 0, 0, 0, 1, 0, 0, 0, 1):
        block += s15fixed16(v)
    block += struct.pack(">HH", input_tables.shape[1], output_tables.shape[1])
    for table in input_tables:
        block += struct.pack(">%dH" % table.size, *table.tolist())
    flat = np.asarray(clut, dtype=int).ravel()
    block += struct.pack(">%dH" % flat.size, *flat.tolist())
    for table in output_tables:
        block += struct.pack(">%dH" % table.size, *table.tolist())
    return bytes(block)


def model_clut(M, gamma, grid_points, black=None):
    """
    Fill a lut16 grid from a matrix/gamma display model, XYZ encoded as raw/32768.
    With a black point, XYZ = black + (1 - k) * M @ rgb_linear where black = k * white.
    """
    M = np.asarray(M, dtype=float)
    k = 0.0 if black is None else black
    white = M @ np.ones(3)
    axis = np.linspace(0.0, 1.0, grid_points) ** gamma
    r, g, b = np.meshgrid(axis, axis, axis, indexing="ij")
    rgb = np.stack([r.ravel(), g.ravel(), b.ravel()])
    xyz = k * white[:, None] + (1.0 - k) * (M @ rgb)
    return np.clip(np.round(xyz.T * 32768), 0, 65535).astype(int)


def identity_table(entries):
    return np.round(np.linspace(0, 65535, entries)).astype(int)


def lut_profile(M, gamma=2.2, grid_points=17, entries=256, black=None, extra_tags=()):
    clut = model_clut(M, gamma, grid_points, black)
    tables = [identity_table(entries)] * 3
    tag = mft2_tag(grid_points, clut, tables, tables)
    return build_profile([("A2B1", tag)] + list(extra_tags))
