"""
sc2k-re: Top-level city decoder.

decode_city() checks the header, splits the container, runs every segment
interpreter, then classifies buildings and reconstructs multi-tile ones.
Header and container errors abort; segment problems become warnings.
"""

import logging
import struct

from .buildings import classify_tiles, find_multi_tile_buildings
from .constants import DIALECTS, DIALECT_MAC_DOS, HEADER_SIZE
from .container import check_header, split_segments
from .errors import SEGMENT_DECODE_FAILED, SegmentWarning
from .model import City
from .segments import interpret_segment, warn

logger = logging.getLogger(__name__)


def decode_segments(segments: dict, dialect: str = DIALECT_MAC_DOS) -> City:
    """
    Build a City from already split {tag: decoded bytes} segments.

    Each interpreter runs in isolation: a failure inside one is recorded as
    a warning and the rest still run.
    """
    if dialect not in DIALECTS:
        raise ValueError(f"unknown dialect {dialect!r} (expected one of {', '.join(DIALECTS)})")

    city = City(dialect=dialect)
    for tag, data in segments.items():
        try:
            interpret_segment(tag, data, city)
        except (ValueError, IndexError, struct.error) as e:
            warn(city, tag, SEGMENT_DECODE_FAILED, f"interpreter failed: {e}")

    classify_tiles(city.tiles)
    city.buildings = tuple(find_multi_tile_buildings(city.tiles))
    city.tiles = tuple(city.tiles)
    return city


def decode_city(data: bytes, dialect: str = DIALECT_MAC_DOS) -> City:
    """
    Decode a complete city save file held in memory.

    Args:
        data: Whole file contents, starting with the 12-byte header
        dialect: Bit layout of ALTM/XZON (DIALECT_MAC_DOS or DIALECT_WIN95)

    Returns:
        Fully populated City

    Raises:
        InvalidHeader: If the FORM/SCDH magic does not match
        TruncatedContainer: If a segment length runs past the end of data
    """
    check_header(data)

    failed = []

    def on_error(tag, exc):
        failed.append(SegmentWarning(tag, SEGMENT_DECODE_FAILED, f"dropped: {exc}"))

    segments = split_segments(memoryview(data)[HEADER_SIZE:], on_error=on_error)
    city = decode_segments(segments, dialect)
    for w in failed:
        logger.warning("%s", w)
    city.warnings[:0] = failed
    return city
