"""Decoding of DirectDraw Surface (DDS) images into plain 8-bit pixel data.

DXT1 to DXT5 compressed surfaces and uncompressed 24/32-bit surfaces are
supported. Cube maps with square faces are stacked vertically and mipmaps
beyond the first level are skipped.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Union

import numpy as np

MAGIC = b"DDS "
HEADER_SIZE = 124
FILE_HEADER_SIZE = 128

_HEADER = struct.Struct("<32I")
_MAGIC_VALUE = int.from_bytes(MAGIC, "little")

# Surface description flags.
DDSD_CAPS = 0x00000001
DDSD_HEIGHT = 0x00000002
DDSD_WIDTH = 0x00000004
DDSD_PITCH = 0x00000008
DDSD_PIXELFORMAT = 0x00001000
DDSD_MIPMAPCOUNT = 0x00020000
DDSD_LINEARSIZE = 0x00080000
DDSD_DEPTH = 0x00800000

# Pixel format flags.
DDPF_ALPHAPIXELS = 0x00000001
DDPF_FOURCC = 0x00000004
DDPF_RGB = 0x00000040

# First capability word.
DDSCAPS_COMPLEX = 0x00000008
DDSCAPS_TEXTURE = 0x00001000
DDSCAPS_MIPMAP = 0x00400000

# Second capability word.
DDSCAPS2_CUBEMAP = 0x00000200
DDSCAPS2_CUBEMAP_POSITIVEX = 0x00000400
DDSCAPS2_CUBEMAP_NEGATIVEX = 0x00000800
DDSCAPS2_CUBEMAP_POSITIVEY = 0x00001000
DDSCAPS2_CUBEMAP_NEGATIVEY = 0x00002000
DDSCAPS2_CUBEMAP_POSITIVEZ = 0x00004000
DDSCAPS2_CUBEMAP_NEGATIVEZ = 0x00008000
DDSCAPS2_VOLUME = 0x00200000

_REQUIRED_FLAGS = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT

BytesLike = Union[bytes, bytearray, memoryview]


class DDSError(ValueError):
    """Raised when data is not a DDS image this decoder can read."""


@dataclass(frozen=True)
class DDSImage:
    """A decoded image.

    ``channels`` is the number of bytes per pixel in ``data``; ``components``
    is the channel count the decoder reports for the source surface. For a
    cube map ``height`` covers all six faces stacked top to bottom.
    """

    width: int
    height: int
    channels: int
    components: int
    faces: int
    data: bytes

    def pixels(self) -> np.ndarray:
        """The pixel data as an array of shape (height, width, channels)."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, self.channels
        ).copy()


class _Reader:
    def __init__(self, data: BytesLike) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise DDSError("truncated DDS data")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def skip(self, count: int) -> None:
        self._pos = min(self._pos + count, len(self._data))


def is_dds(data: BytesLike) -> bool:
    """Whether ``data`` starts with a DDS magic number and a 124-byte header size."""
    raw = bytes(data[:8])
    return len(raw) == 8 and raw[:4] == MAGIC and int.from_bytes(raw[4:], "little") == HEADER_SIZE


def convert_bit_range(c: int, from_bits: int, to_bits: int) -> int:
    """Rescale a ``from_bits``-bit value to ``to_bits`` bits with rounding."""
    b = (1 << (from_bits - 1)) + c * ((1 << to_bits) - 1)
    return (b + (b >> from_bits)) >> from_bits


def rgb888_from_565(c: int) -> tuple[int, int, int]:
    """Expand a 16-bit 5:6:5 colour to an 8-bit (r, g, b) triple."""
    return (
        convert_bit_range((c >> 11) & 31, 5, 8),
        convert_bit_range((c >> 5) & 63, 6, 8),
        convert_bit_range(c & 31, 5, 8),
    )


def _compressed_block(compressed: BytesLike) -> bytes:
    raw = bytes(compressed)
    if len(raw) != 8:
        raise ValueError(f"a compressed block is 8 bytes, got {len(raw)}")
    return raw


def _pixel_block(block: BytesLike) -> bytearray:
    out = bytearray(block)
    if len(out) != 64:
        raise ValueError(f"a decoded block is 64 bytes (4x4 RGBA), got {len(out)}")
    return out


def _endpoints(raw: bytes) -> tuple[int, int, tuple[int, int, int], tuple[int, int, int]]:
    c0 = raw[0] | (raw[1] << 8)
    c1 = raw[2] | (raw[3] << 8)
    return c0, c1, rgb888_from_565(c0), rgb888_from_565(c1)


def _thirds(rgb0, rgb1) -> tuple[tuple[int, ...], tuple[int, ...]]:
    near0 = tuple((2 * a + b) // 3 for a, b in zip(rgb0, rgb1))
    near1 = tuple((a + 2 * b) // 3 for a, b in zip(rgb0, rgb1))
    return near0, near1


def decode_dxt1_block(compressed: BytesLike) -> bytes:
    """Decode an 8-byte DXT1 block into 4x4 RGBA pixels (64 bytes)."""
    raw = _compressed_block(compressed)
    c0, c1, rgb0, rgb1 = _endpoints(raw)
    if c0 > c1:
        near0, near1 = _thirds(rgb0, rgb1)
        colors = (rgb0 + (255,), rgb1 + (255,), near0 + (255,), near1 + (255,))
    else:
        middle = tuple((a + b) // 2 for a, b in zip(rgb0, rgb1))
        colors = (rgb0 + (255,), rgb1 + (255,), middle + (255,), (0, 0, 0, 0))
    bits = int.from_bytes(raw[4:8], "little")
    return bytes(ch for k in range(16) for ch in colors[(bits >> (2 * k)) & 3])


def decode_dxt23_alpha_block(block: BytesLike, compressed: BytesLike) -> bytes:
    """Return ``block`` with its alpha channel replaced by explicit 4-bit DXT2/3 alpha."""
    out = _pixel_block(block)
    bits = int.from_bytes(_compressed_block(compressed), "little")
    out[3::4] = bytes(convert_bit_range((bits >> (4 * k)) & 15, 4, 8) for k in range(16))
    return bytes(out)


def decode_dxt45_alpha_block(block: BytesLike, compressed: BytesLike) -> bytes:
    """Return ``block`` with its alpha channel replaced by interpolated DXT4/5 alpha."""
    out = _pixel_block(block)
    raw = _compressed_block(compressed)
    a0, a1 = raw[0], raw[1]
    if a0 > a1:
        table = [a0, a1] + [((7 - k) * a0 + k * a1) // 7 for k in range(1, 7)]
    else:
        table = [a0, a1] + [((5 - k) * a0 + k * a1) // 5 for k in range(1, 5)] + [0, 255]
    bits = int.from_bytes(raw[2:8], "little")
    out[3::4] = bytes(table[(bits >> (3 * k)) & 7] for k in range(16))
    return bytes(out)


def decode_dxt_color_block(block: BytesLike, compressed: BytesLike) -> bytes:
    """Return ``block`` with RGB replaced by a four-colour DXT2-5 colour block."""
    out = _pixel_block(block)
    raw = _compressed_block(compressed)
    _, _, rgb0, rgb1 = _endpoints(raw)
    near0, near1 = _thirds(rgb0, rgb1)
    colors = (rgb0, rgb1, near0, near1)
    bits = int.from_bytes(raw[4:8], "little")
    for k in range(16):
        out[4 * k:4 * k + 3] = bytes(colors[(bits >> (2 * k)) & 3])
    return bytes(out)


def _read_block(reader: _Reader, family: int) -> bytes:
    if family == 1:
        return decode_dxt1_block(reader.read(8))
    alpha_decoder = decode_dxt23_alpha_block if family < 4 else decode_dxt45_alpha_block
    block = alpha_decoder(bytes(64), reader.read(8))
    return decode_dxt_color_block(block, reader.read(8))


def _read_compressed(reader: _Reader, width: int, height: int, faces: int, family: int,
                     mip_levels: int) -> np.ndarray:
    block_cols = (width + 3) >> 2
    block_rows = (height + 3) >> 2
    block_size = 8 if family == 1 else 16
    out = np.zeros((faces * height, width, 4), dtype=np.uint8)
    for face in range(faces):
        top = face * height
        for row in range(block_rows):
            for col in range(block_cols):
                tile = np.frombuffer(_read_block(reader, family), dtype=np.uint8).reshape(4, 4, 4)
                ref_x, ref_y = 4 * col, 4 * row
                bw = min(4, width - ref_x)
                bh = min(4, height - ref_y)
                out[top + ref_y:top + ref_y + bh, ref_x:ref_x + bw] = tile[:bh, :bw]
        for level in range(1, mip_levels):
            mx = max(width >> (level + 2), 1)
            my = max(height >> (level + 2), 1)
            reader.skip(mx * my * block_size)
    return out.reshape(-1, 4)


def _read_uncompressed(reader: _Reader, width: int, height: int, faces: int, channels: int,
                       mip_levels: int) -> np.ndarray:
    chunks = []
    for _ in range(faces):
        chunks.append(reader.read(width * height * channels))
        for level in range(1, mip_levels):
            mx = max(width >> level, 1)
            my = max(height >> level, 1)
            reader.skip(mx * my * channels)
    pixels = np.frombuffer(b"".join(chunks), dtype=np.uint8).reshape(-1, channels)
    order = [2, 1, 0] + ([3] if channels == 4 else [])
    return pixels[:, order]


def _convert_channels(pixels: np.ndarray, target: int) -> np.ndarray:
    """Convert (N, 3|4) pixels to ``target`` channels (grey, grey+alpha, RGB, RGBA)."""
    rgb = pixels[:, :3].astype(np.uint32)
    grey = ((rgb[:, 0] * 77 + rgb[:, 1] * 150 + rgb[:, 2] * 29) >> 8).astype(np.uint8)
    if pixels.shape[1] == 4:
        alpha = pixels[:, 3]
    else:
        alpha = np.full(len(pixels), 255, dtype=np.uint8)
    columns = {
        1: [grey],
        2: [grey, alpha],
        3: [pixels[:, 0], pixels[:, 1], pixels[:, 2]],
        4: [pixels[:, 0], pixels[:, 1], pixels[:, 2], alpha],
    }[target]
    return np.stack(columns, axis=1).astype(np.uint8)


def load_dds(data: BytesLike, req_comp: int = 0) -> DDSImage:
    """Decode a DDS image held in memory.

    ``req_comp`` from 1 to 4 asks for that many channels per pixel; any other
    value keeps the decoded channels, dropping alpha when it is fully opaque.
    """
    reader = _Reader(data)
    header = _HEADER.unpack(reader.read(FILE_HEADER_SIZE))
    magic, size, flags, height, width = header[:5]
    mip_count = header[7]
    pf_size, pf_flags, fourcc = header[19:22]
    caps1, caps2 = header[27:29]

    if magic != _MAGIC_VALUE:
        raise DDSError("not a DDS file: bad magic number")
    if size != HEADER_SIZE:
        raise DDSError(f"unexpected DDS header size {size}")
    if flags & _REQUIRED_FLAGS != _REQUIRED_FLAGS:
        raise DDSError("DDS header lacks caps, width, height or pixel format")
    if pf_size != 32:
        raise DDSError(f"unexpected pixel format size {pf_size}")
    if pf_flags & (DDPF_FOURCC | DDPF_RGB) == 0:
        raise DDSError("pixel format is neither compressed nor RGB")
    if caps1 & DDSCAPS_TEXTURE == 0:
        raise DDSError("surface is not a texture")

    faces = 6 if (caps2 & DDSCAPS2_CUBEMAP) and width == height else 1
    mip_levels = mip_count if (caps1 & DDSCAPS_MIPMAP) and mip_count > 1 else 1

    if pf_flags & DDPF_FOURCC:
        family = 1 + (fourcc >> 24) - ord("1")
        if not 1 <= family <= 5:
            raise DDSError("unsupported compressed format")
        channels = 4
        pixels = _read_compressed(reader, width, height, faces, family, mip_levels)
    else:
        channels = 4 if pf_flags & DDPF_ALPHAPIXELS else 3
        pixels = _read_uncompressed(reader, width, height, faces, channels, mip_levels)

    components = channels
    if 1 <= req_comp <= 4:
        if req_comp != channels:
            pixels = _convert_channels(pixels, req_comp)
    elif channels == 4 and not bool((pixels[:, 3] < 255).any()):
        pixels = _convert_channels(pixels, 3)
        components = 3

    return DDSImage(
        width=width,
        height=height * faces,
        channels=pixels.shape[1],
        components=components,
        faces=faces,
        data=pixels.tobytes(),
    )


def load_dds_file(path: Union[str, os.PathLike], req_comp: int = 0) -> DDSImage:
    """Decode the DDS image stored at ``path``."""
    with open(path, "rb") as handle:
        return load_dds(handle.read(), req_comp)