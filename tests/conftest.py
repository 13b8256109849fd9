import struct

import pytest

from sc2k.compression import rle_compress
from sc2k.constants import RAW_SEGMENTS, TILE_COUNT
from sc2k.model import City


def pack_segment(tag, content, compress=None):
    """tag + uint32 BE length + (RLE compressed unless raw) content."""
    if compress is None:
        compress = tag not in RAW_SEGMENTS
    body = rle_compress(content) if compress else bytes(content)
    return tag.encode('latin-1') + struct.pack('>I', len(body)) + body


def build_city_file(segments):
    """Build a FORM/SCDH container from (tag, content) pairs or a dict."""
    if isinstance(segments, dict):
        segments = segments.items()
    body = b''.join(pack_segment(tag, content) for tag, content in segments)
    return b'FORM' + struct.pack('>I', len(body) + 4) + b'SCDH' + body


def tile_bytes(values=None, fill=0):
    """16384-byte per-tile segment with {(x, y): value} overrides."""
    data = bytearray([fill]) * TILE_COUNT
    for (x, y), v in (values or {}).items():
        data[y * 128 + x] = v
    return bytes(data)


@pytest.fixture
def segment():
    return pack_segment


@pytest.fixture
def city_file():
    return build_city_file


@pytest.fixture
def grid():
    return tile_bytes


@pytest.fixture
def city():
    return City()
