"""
sc2k-re: Building classification and multi-tile reconstruction.

XBLD stores one building code per tile with no width or height, so a 3x3
building appears as nine tiles carrying the same code. The reconstructor
groups those back into MultiTileBuilding records.
"""

import logging

from .constants import (
    BUILDING_OTHER, BUILDING_RANGES, CIVIC_4X4_CODES, CIVIC_DEFAULT_SIZE,
    FIRST_REAL_BUILDING, GRID_SIZE, MAX_FOOTPRINT,
)
from .model import MultiTileBuilding, MultiTileRef

logger = logging.getLogger(__name__)


# =============================================================================
# CLASSIFIER
# =============================================================================

def building_class(code):
    """Code -> class name with size suffix (e.g. 'commercial_2x2').

    Returns None for code 0 and 'other' for unmapped codes.
    """
    if not code:
        return None
    for first, last, name in BUILDING_RANGES:
        if first <= code <= last:
            return name
    return BUILDING_OTHER


def building_category(code):
    """Code -> category without size suffix (e.g. 'commercial')."""
    name = building_class(code)
    if name is None:
        return None
    return name.split('_', 1)[0]


def building_size(code):
    """Footprint side length (1-4) for a code; 0 for no building."""
    name = building_class(code)
    if name is None:
        return 0
    for size in range(1, MAX_FOOTPRINT + 1):
        if name.endswith(f'_{size}x{size}'):
            return size
    if name == 'civic':
        return 4 if code in CIVIC_4X4_CODES else CIVIC_DEFAULT_SIZE
    return 1


def classify_tiles(tiles):
    """Set building_type and building_footprint on every tile with a building."""
    for tile in tiles:
        if tile.building_code:
            tile.building_type = building_category(tile.building_code)
            tile.building_footprint = building_size(tile.building_code)


# =============================================================================
# MULTI-TILE RECONSTRUCTION
# =============================================================================

def _square_matches(tiles, x, y, size, code):
    if x + size > GRID_SIZE or y + size > GRID_SIZE:
        return False
    for dy in range(size):
        row = (y + dy) * GRID_SIZE
        for dx in range(size):
            if tiles[row + x + dx].building_code != code:
                return False
    return True


def find_multi_tile_buildings(tiles):
    """
    Group same-code square footprints into buildings.

    Scans row-major; each unclaimed tile with a real building code tries
    sizes 4, 3, 2 in that order and takes the first square whose tiles all
    share its code and are unclaimed. Member tiles get a MultiTileRef and
    their footprint set to the matched size. Tiles with no match are 1x1
    and get no record.

    Returns:
        List of MultiTileBuilding, in scan order
    """
    buildings = []
    claimed = bytearray(len(tiles))

    for y in range(GRID_SIZE):
        for x in range(GRID_SIZE):
            i = y * GRID_SIZE + x
            if claimed[i]:
                continue
            code = tiles[i].building_code
            if not code or code < FIRST_REAL_BUILDING:
                continue

            for size in range(MAX_FOOTPRINT, 1, -1):
                if not _square_matches(tiles, x, y, size, code):
                    continue
                members = [(y + dy) * GRID_SIZE + x + dx
                           for dy in range(size) for dx in range(size)]
                if any(claimed[m] for m in members):
                    continue
                ref = MultiTileRef(len(buildings), x, y, size, size)
                buildings.append(MultiTileBuilding(x, y, size, size, code))
                for m in members:
                    claimed[m] = 1
                    tiles[m].multi_tile_ref = ref
                    tiles[m].building_footprint = size
                break
            else:
                claimed[i] = 1

    logger.debug("reconstructed %d multi-tile buildings", len(buildings))
    return buildings
