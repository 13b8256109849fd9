"""
sc2k-re: Decoder error kinds.

Header and container errors are fatal and abort a decode. Segment-level
problems are recorded on the City as SegmentWarning entries instead.
"""

from dataclasses import dataclass


class Sc2kError(ValueError):
    """Base class for every error raised by the decoder."""


class InvalidHeader(Sc2kError):
    """File does not start with the FORM ... SCDH magic."""


class TruncatedContainer(Sc2kError):
    """A segment declares more content bytes than the buffer holds."""

    def __init__(self, tag, offset, declared, available):
        self.tag = tag
        self.offset = offset
        self.declared = declared
        self.available = available
        super().__init__(
            f"segment {tag!r} at offset 0x{offset:X} declares {declared} bytes, "
            f"only {available} remain")


class TruncatedInput(Sc2kError):
    """An RLE run extends past the end of the compressed buffer."""

    def __init__(self, offset, needed, available):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"RLE: run at offset {offset} needs {needed} bytes, "
            f"only {available} remain")


UNEXPECTED_SEGMENT_LENGTH = "UnexpectedSegmentLength"
SEGMENT_DECODE_FAILED = "SegmentDecodeFailed"


@dataclass(frozen=True)
class SegmentWarning:
    """Non-fatal problem found while interpreting one segment."""
    tag: str
    kind: str
    message: str

    def __str__(self):
        return f"{self.tag}: {self.message}"
