"""
sc2k-re: IFF container header check and segment splitter.

Container layout:
  - 12-byte header: "FORM", uint32 BE file length, "SCDH"
  - Segments until end of buffer:
      4-byte ASCII tag, uint32 BE content length, content bytes
  - Content is RLE compressed except for tags in RAW_SEGMENTS
"""

import logging
import struct

from .compression import rle_decompress
from .constants import (
    CONTAINER_MAGIC, DIALECT_MAGIC, HEADER_SIZE, RAW_SEGMENTS,
    SEGMENT_LENGTH_SIZE, SEGMENT_TAG_SIZE,
)
from .errors import InvalidHeader, TruncatedContainer, TruncatedInput

logger = logging.getLogger(__name__)

SEGMENT_PREFIX_SIZE = SEGMENT_TAG_SIZE + SEGMENT_LENGTH_SIZE


def is_city_file(data: bytes) -> bool:
    """True if data starts with the FORM ... SCDH header. Never raises."""
    if len(data) < HEADER_SIZE:
        return False
    return (bytes(data[0:4]) == CONTAINER_MAGIC
            and bytes(data[8:12]) == DIALECT_MAGIC)


def check_header(data: bytes):
    """Raise InvalidHeader unless data is a city save file."""
    if not is_city_file(data):
        head = bytes(data[:HEADER_SIZE])
        raise InvalidHeader(f"not a city save file (header: {head.hex(' ')})")


def header_length(data: bytes) -> int:
    """Declared container length from header bytes 4-7."""
    return struct.unpack_from('>I', data, 4)[0]


def iter_segments(stream: bytes, base_offset: int = HEADER_SIZE):
    """
    Walk the post-header stream, yielding (tag, offset, content).

    offset is the position of the segment prefix in the whole file and
    content is the stored (possibly compressed) bytes.

    Raises:
        TruncatedContainer: If a prefix or declared length runs past the end
    """
    pos = 0
    size = len(stream)
    while size - pos > 0:
        if size - pos < SEGMENT_PREFIX_SIZE:
            tag = bytes(stream[pos:pos + SEGMENT_TAG_SIZE]).decode('latin-1')
            raise TruncatedContainer(tag, base_offset + pos,
                                     SEGMENT_PREFIX_SIZE, size - pos)
        tag = bytes(stream[pos:pos + SEGMENT_TAG_SIZE]).decode('latin-1')
        length = struct.unpack_from('>I', stream, pos + SEGMENT_TAG_SIZE)[0]
        start = pos + SEGMENT_PREFIX_SIZE
        if start + length > size:
            raise TruncatedContainer(tag, base_offset + pos, length, size - start)
        yield tag, base_offset + pos, bytes(stream[start:start + length])
        pos = start + length


def split_segments(stream: bytes, on_error=None) -> dict:
    """
    Split the post-header stream into {tag: decoded bytes}.

    Tags in RAW_SEGMENTS are kept as stored, the rest are RLE decompressed.
    A later duplicate tag replaces an earlier one.

    Args:
        stream: File contents after the 12-byte header
        on_error: Optional callable(tag, exc). When given, a segment whose
            RLE body is truncated is reported and skipped; otherwise the
            TruncatedInput propagates.

    Returns:
        Dict of tag -> decoded segment bytes, in file order

    Raises:
        TruncatedContainer: If a declared length runs past the end
        TruncatedInput: If a segment fails to decompress and on_error is None
    """
    segments = {}
    for tag, offset, content in iter_segments(stream):
        if tag in RAW_SEGMENTS:
            data = content
        else:
            try:
                data = rle_decompress(content)
            except TruncatedInput as e:
                if on_error is None:
                    raise
                on_error(tag, e)
                continue
        if tag in segments:
            logger.debug("duplicate segment %s at 0x%X replaces earlier copy", tag, offset)
        logger.debug("segment %s at 0x%X: %d -> %d bytes", tag, offset, len(content), len(data))
        segments[tag] = data
    return segments
