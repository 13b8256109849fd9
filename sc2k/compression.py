"""
sc2k-re: Segment compression library.

Implements:
  - RLE decompression used by every compressed container segment
  - RLE compression (inverse), used to re-pack single segments
"""

from .errors import TruncatedInput


# Longest run either kind of control byte can describe
MAX_LITERAL_RUN = 127
MAX_REPEAT_RUN = 128


# =============================================================================
# RLE DECOMPRESSION (container segments)
# =============================================================================

def rle_decompress(data: bytes) -> bytes:
    """
    Decompress one RLE encoded segment body.

    Control byte b:
      - b < 128:  copy the next b bytes verbatim (b == 0 copies nothing)
      - b >= 128: repeat the next byte (b - 127) times

    Args:
        data: Compressed segment content (without tag/length prefix)

    Returns:
        Decompressed bytes

    Raises:
        TruncatedInput: If a run extends past the end of data
    """
    out = bytearray()
    pos = 0
    size = len(data)

    while pos < size:
        b = data[pos]
        if b < 128:
            end = pos + 1 + b
            if end > size:
                raise TruncatedInput(pos, b, size - pos - 1)
            out += data[pos + 1:end]
            pos = end
        else:
            if pos + 1 >= size:
                raise TruncatedInput(pos, 1, 0)
            out += bytes([data[pos + 1]]) * (b - 127)
            pos += 2

    return bytes(out)


def rle_compress(data: bytes) -> bytes:
    """
    Compress data with segment RLE encoding (inverse of rle_decompress).

    Encoding rules:
      - Run of 3..128 identical bytes -> (127 + n) VV
      - Everything else is gathered into literal runs of up to 127 bytes

    Args:
        data: Uncompressed segment content

    Returns:
        Compressed bytes
    """
    out = bytearray()
    literal = bytearray()
    i = 0

    def flush_literal():
        for start in range(0, len(literal), MAX_LITERAL_RUN):
            chunk = literal[start:start + MAX_LITERAL_RUN]
            out.append(len(chunk))
            out.extend(chunk)
        literal.clear()

    while i < len(data):
        b = data[i]
        run = 1
        while i + run < len(data) and data[i + run] == b and run < MAX_REPEAT_RUN:
            run += 1

        if run >= 3:
            flush_literal()
            out.extend(bytes([127 + run, b]))
            i += run
        else:
            literal.append(b)
            i += 1

    flush_literal()
    return bytes(out)
