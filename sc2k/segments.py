"""
sc2k-re: Segment interpreters.

Each interpreter takes (decoded segment bytes, City) and fills in its own
part of the model. No interpreter reads what another one wrote, so they
can run in any order. Short or oversized segments are processed up to
what is available and recorded as UnexpectedSegmentLength warnings.
"""

import logging
import struct

from .constants import (
    BUILDING_COUNT_SLOTS, CITY_NAME_MAX_LENGTH, DIALECT_WIN95, FLAT,
    LABEL_COUNT, LABEL_MAX_LENGTH, LABEL_SLOT_SIZE, MICROSIM_COUNT,
    MICROSIM_SIZE, MINIMAPS, MISC_BUILDING_COUNTS, MISC_FIELDS, MISC_UNSIGNED,
    OPEN_SIDES, SLOPE_PATTERNS, TERRAIN_SURFACE_FIRST, TERRAIN_SURFACE_LAST,
    TERRAIN_WATERFALL, TEXT_DISASTER, TEXT_DISASTER_FIRST, TEXT_MICROSIM,
    TEXT_MICROSIM_FIRST, TEXT_MICROSIM_LAST, TEXT_NEIGHBOR, TEXT_NEIGHBOR_CODE,
    TEXT_OTHER, TEXT_SIGN, TEXT_SIGN_LAST, TILE_COUNT,
    UNDERGROUND_CROSSOVER, UNDERGROUND_CROSSOVER_PIPE_HORIZONTAL,
    UNDERGROUND_CROSSOVER_PIPE_VERTICAL, UNDERGROUND_MISSILE_SILO,
    UNDERGROUND_MISSILE_SILO_CODE, UNDERGROUND_NONE, UNDERGROUND_PIPES,
    UNDERGROUND_SUBWAY, UNDERGROUND_SUBWAY_STATION,
    UNDERGROUND_SUBWAY_STATION_CODE, WATER_LEVELS, ZONE_CORNER_BITS,
)
from .errors import UNEXPECTED_SEGMENT_LENGTH, SegmentWarning
from .model import Corners, Microsim, Terrain, TextRef, Underground, Zone

logger = logging.getLogger(__name__)

MISC_MIN_LENGTH = max(MISC_FIELDS.values()) + 4


def warn(city, tag, kind, message):
    """Record a non-fatal problem on the city and log it."""
    w = SegmentWarning(tag, kind, message)
    city.warnings.append(w)
    logger.warning("%s", w)


def check_length(city, tag, data, expected, at_least=False):
    """Warn when len(data) differs from expected (or is below it)."""
    size = len(data)
    if size == expected or (at_least and size > expected):
        return
    warn(city, tag, UNEXPECTED_SEGMENT_LENGTH,
         f"expected {'at least ' if at_least else ''}{expected} bytes, got {size}")


def slope(pattern):
    """Corner pattern by number; numbers past 0xD fall back to flat."""
    return Corners(*SLOPE_PATTERNS.get(pattern, FLAT))


def ascii_string(raw):
    return bytes(raw).decode('latin-1')


# =============================================================================
# PER-TILE SEGMENTS
# =============================================================================

def interpret_altm(data, city):
    """ALTM: uint16 BE per tile; layout depends on the city dialect."""
    check_length(city, "ALTM", data, TILE_COUNT * 2)
    count = min(len(data) // 2, TILE_COUNT)
    words = struct.unpack_from(f'>{count}H', data, 0)
    for tile, square in zip(city.tiles, words):
        if city.dialect == DIALECT_WIN95:
            # Bits 0-4 tunnel, 5-9 water height, 10-14 altitude
            tile.tunnel_level = square & 0x1F
            tile.water_height = (square >> 5) & 0x1F
            tile.altitude = ((square >> 10) & 0x1F) * 100 + 50
        else:
            # Bits 0-4 altitude, bit 7 water
            tile.altitude = (square & 0x1F) * 100 + 50
            tile.is_water = bool(square & 0x80)


def interpret_xbit(data, city):
    """XBIT: one byte of independent flags per tile, LSB first."""
    check_length(city, "XBIT", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.powerable = bool(square & 0x01)
        tile.powered = bool(square & 0x02)
        tile.piped = bool(square & 0x04)
        tile.watered = bool(square & 0x08)
        tile.xval_mask = bool(square & 0x10)
        tile.water_covered = bool(square & 0x20)
        tile.rotate = bool(square & 0x40)
        tile.is_salt_water = bool(square & 0x80)


def interpret_xbld(data, city):
    """XBLD: raw building code per tile. Classified after all segments."""
    check_length(city, "XBLD", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.building_code = square


def decode_terrain(square) -> Terrain:
    """Decode one XTER byte. Unknown values give an empty Terrain."""
    if square < TERRAIN_WATERFALL:
        pattern = square & 0x0F
        # Nibbles 0xE-0xF carry a water level but no slope
        return Terrain(slope=slope(pattern) if pattern in SLOPE_PATTERNS else None,
                       water_level=WATER_LEVELS.get(square >> 4))
    if square == TERRAIN_WATERFALL:
        return Terrain(slope=slope(0), water_level=WATER_LEVELS[0x4])
    if TERRAIN_SURFACE_FIRST <= square <= TERRAIN_SURFACE_LAST:
        return Terrain(slope=slope(0), water_level=WATER_LEVELS[0x3],
                       open_sides=OPEN_SIDES[square - TERRAIN_SURFACE_FIRST])
    return Terrain()


def interpret_xter(data, city):
    check_length(city, "XTER", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.terrain = decode_terrain(square)


def decode_underground(square) -> Underground:
    """Decode one XUND byte."""
    if 0x01 <= square <= 0x0F:
        return Underground(UNDERGROUND_SUBWAY, slope(square))
    if 0x10 <= square <= 0x1E:
        return Underground(UNDERGROUND_PIPES, slope(square - 0x10))
    if square == UNDERGROUND_CROSSOVER_PIPE_VERTICAL:
        return Underground(UNDERGROUND_CROSSOVER, slope(0), pipe_vertical=True)
    if square == UNDERGROUND_CROSSOVER_PIPE_HORIZONTAL:
        return Underground(UNDERGROUND_CROSSOVER, slope(0), pipe_vertical=False)
    if square == UNDERGROUND_MISSILE_SILO_CODE:
        return Underground(UNDERGROUND_MISSILE_SILO, slope(0))
    if square == UNDERGROUND_SUBWAY_STATION_CODE:
        return Underground(UNDERGROUND_SUBWAY_STATION, slope(0))
    return Underground(UNDERGROUND_NONE, slope(0))


def interpret_xund(data, city):
    check_length(city, "XUND", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.underground = decode_underground(square)


def decode_zone(square, dialect) -> Zone:
    """Decode one XZON byte using the dialect's corner/type nibbles."""
    nw, sw, se, ne = ZONE_CORNER_BITS[dialect]
    zone_type = square >> 4 if dialect == DIALECT_WIN95 else square & 0x0F
    return Zone(type=zone_type,
                nw=bool(square & nw), sw=bool(square & sw),
                se=bool(square & se), ne=bool(square & ne))


def interpret_xzon(data, city):
    check_length(city, "XZON", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.zone = decode_zone(square, city.dialect)


def decode_text(square):
    """Decode one XTXT byte; 0 means no text."""
    if square == 0:
        return None
    if square <= TEXT_SIGN_LAST:
        return TextRef(TEXT_SIGN, square, index=square)
    if TEXT_MICROSIM_FIRST <= square <= TEXT_MICROSIM_LAST:
        return TextRef(TEXT_MICROSIM, square, index=square - TEXT_MICROSIM_FIRST)
    if square == TEXT_NEIGHBOR_CODE:
        return TextRef(TEXT_NEIGHBOR, square)
    if square >= TEXT_DISASTER_FIRST:
        return TextRef(TEXT_DISASTER, square)
    return TextRef(TEXT_OTHER, square)


def interpret_xtxt(data, city):
    check_length(city, "XTXT", data, TILE_COUNT)
    for tile, square in zip(city.tiles, data):
        tile.text = decode_text(square)


# =============================================================================
# TABLE SEGMENTS
# =============================================================================

def interpret_cnam(data, city):
    """CNAM: length byte (clamped to 31) + name. Stored uncompressed."""
    if not data:
        warn(city, "CNAM", UNEXPECTED_SEGMENT_LENGTH, "empty segment")
        return
    length = min(data[0], CITY_NAME_MAX_LENGTH)
    if 1 + length > len(data):
        warn(city, "CNAM", UNEXPECTED_SEGMENT_LENGTH,
             f"name length {length} exceeds {len(data) - 1} available bytes")
    city.name = ascii_string(data[1:1 + length])


def interpret_xlab(data, city):
    """XLAB: 256 slots of 25 bytes (length byte <= 24 + text)."""
    check_length(city, "XLAB", data, LABEL_COUNT * LABEL_SLOT_SIZE)
    labels = []
    for i in range(LABEL_COUNT):
        pos = i * LABEL_SLOT_SIZE
        if pos >= len(data):
            break
        length = min(data[pos], LABEL_MAX_LENGTH)
        labels.append(ascii_string(data[pos + 1:pos + 1 + length]))
    city.labels = labels


def interpret_xmic(data, city):
    """XMIC: 150 records of 8 bytes (type, value, 3 x uint16 LE)."""
    check_length(city, "XMIC", data, MICROSIM_COUNT * MICROSIM_SIZE)
    count = min(len(data) // MICROSIM_SIZE, MICROSIM_COUNT)
    city.microsims = [
        Microsim(*struct.unpack_from('<BBHHH', data, i * MICROSIM_SIZE))
        for i in range(count)
    ]


def interpret_misc(data, city):
    """MISC: fixed-offset int32 BE ledger fields plus building counts."""
    check_length(city, "MISC", data, MISC_MIN_LENGTH, at_least=True)
    ledger = city.ledger
    size = len(data)
    for name, offset in MISC_FIELDS.items():
        if offset + 4 <= size:
            fmt = '>I' if name in MISC_UNSIGNED else '>i'
            setattr(ledger, name, struct.unpack_from(fmt, data, offset)[0])

    counts = []
    for i in range(BUILDING_COUNT_SLOTS):
        offset = MISC_BUILDING_COUNTS + i * 4
        counts.append(struct.unpack_from('>i', data, offset)[0]
                      if offset + 4 <= size else None)
    ledger.building_counts = counts


def minimap_interpreter(tag):
    """Build the interpreter storing one minimap segment unchanged."""
    side = MINIMAPS[tag][1]

    def interpret(data, city):
        check_length(city, tag, data, side * side)
        city.minimaps[tag] = bytes(data)

    interpret.__name__ = f"interpret_{tag.lower()}"
    return interpret


def interpret_xgrp(data, city):
    city.graphs = bytes(data)


def interpret_xthg(data, city):
    city.things = bytes(data)


SEGMENT_INTERPRETERS = {
    "ALTM": interpret_altm,
    "CNAM": interpret_cnam,
    "XBIT": interpret_xbit,
    "XBLD": interpret_xbld,
    "XTER": interpret_xter,
    "XUND": interpret_xund,
    "XZON": interpret_xzon,
    "XTXT": interpret_xtxt,
    "XLAB": interpret_xlab,
    "XMIC": interpret_xmic,
    "MISC": interpret_misc,
    "XGRP": interpret_xgrp,
    "XTHG": interpret_xthg,
}
SEGMENT_INTERPRETERS.update({tag: minimap_interpreter(tag) for tag in MINIMAPS})


def interpret_unknown(tag, data, city):
    logger.debug("keeping unknown segment %s (%d bytes)", tag, len(data))
    city.unknown_segments[tag] = bytes(data)


def interpret_segment(tag, data, city):
    """Dispatch one decoded segment to its interpreter."""
    interpreter = SEGMENT_INTERPRETERS.get(tag)
    if interpreter is None:
        interpret_unknown(tag, data, city)
        return
    logger.debug("interpreting %s (%d bytes)", tag, len(data))
    interpreter(data, city)
