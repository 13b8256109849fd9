"""
sc2k-re: Format constants and data tables.

All offsets are 0-indexed. Multi-byte integers in the container and in
MISC are big-endian; XMIC records are little-endian.
"""

# =============================================================================
# CONTAINER LAYOUT
# =============================================================================

HEADER_SIZE = 12
CONTAINER_MAGIC = b"FORM"   # bytes 0-3: IFF container
DIALECT_MAGIC = b"SCDH"     # bytes 8-11: city save file

SEGMENT_TAG_SIZE = 4
SEGMENT_LENGTH_SIZE = 4     # uint32 BE content length

# Segments stored without RLE compression
RAW_SEGMENTS = frozenset({"ALTM", "CNAM"})

GRID_SIZE = 128
TILE_COUNT = GRID_SIZE * GRID_SIZE   # 16384


# =============================================================================
# DIALECTS (bit layouts of ALTM and XZON)
# =============================================================================

DIALECT_MAC_DOS = "mac_dos"
DIALECT_WIN95 = "win95"
DIALECTS = (DIALECT_MAC_DOS, DIALECT_WIN95)


# =============================================================================
# SEGMENT TAGS
# =============================================================================

SEGMENT_NAMES = {
    "ALTM": "Altitude map",
    "CNAM": "City name",
    "XBIT": "Extended tile bits",
    "XBLD": "Building codes",
    "XTER": "Terrain",
    "XUND": "Underground",
    "XZON": "Zones",
    "XTXT": "Tile text references",
    "XLAB": "Labels",
    "XMIC": "Microsimulators",
    "MISC": "City ledger",
    "XTRF": "Traffic minimap",
    "XPLT": "Pollution minimap",
    "XVAL": "Land value minimap",
    "XCRM": "Crime minimap",
    "XPLC": "Police coverage minimap",
    "XFIR": "Fire coverage minimap",
    "XPOP": "Population density minimap",
    "XROG": "Rate of growth minimap",
    "XGRP": "Graph history",
    "XTHG": "Things (planes, boats)",
}

# Minimap tag -> (attribute on City, side length in cells)
MINIMAPS = {
    "XTRF": ("traffic", 64),
    "XPLT": ("pollution_map", 64),
    "XVAL": ("land_values", 64),
    "XCRM": ("crime", 64),
    "XPLC": ("police_coverage", 32),
    "XFIR": ("fire_coverage", 32),
    "XPOP": ("population_density", 32),
    "XROG": ("rate_of_growth", 32),
}


# =============================================================================
# TERRAIN (XTER)
# =============================================================================

# Corner pattern: (NW, NE, SW, SE) raised
SLOPE_PATTERNS = {
    0x0: (False, False, False, False),
    0x1: (True, True, False, False),
    0x2: (False, True, False, True),
    0x3: (False, False, True, True),
    0x4: (True, False, True, False),
    0x5: (True, True, False, True),
    0x6: (False, True, True, True),
    0x7: (True, False, True, True),
    0x8: (True, True, True, False),
    0x9: (False, True, False, False),
    0xA: (False, False, False, True),
    0xB: (False, False, True, False),
    0xC: (True, False, False, False),
    0xD: (True, True, True, True),
}
FLAT = SLOPE_PATTERNS[0x0]

# Edge pattern of surface water tiles 0x40-0x45 (canal and bay orientations)
OPEN_SIDES = {
    0x0: (True, False, False, True),    # left-right open canal
    0x1: (False, True, True, False),    # top-bottom open canal
    0x2: (True, True, False, True),     # right open bay
    0x3: (True, False, True, True),     # left open bay
    0x4: (False, True, True, True),     # top open bay
    0x5: (True, True, True, False),     # bottom open bay
}

WATER_LEVELS = {
    0x0: "dry",
    0x1: "submerged",
    0x2: "shore",
    0x3: "surface",
    0x4: "waterfall",
}

TERRAIN_WATERFALL = 0x3E
TERRAIN_SURFACE_FIRST = 0x40
TERRAIN_SURFACE_LAST = 0x45


# =============================================================================
# UNDERGROUND (XUND)
# =============================================================================

UNDERGROUND_NONE = "none"
UNDERGROUND_SUBWAY = "subway"
UNDERGROUND_PIPES = "pipes"
UNDERGROUND_CROSSOVER = "crossover"
UNDERGROUND_MISSILE_SILO = "missile_silo"
UNDERGROUND_SUBWAY_STATION = "subway_station"

UNDERGROUND_CROSSOVER_PIPE_VERTICAL = 0x1F
UNDERGROUND_CROSSOVER_PIPE_HORIZONTAL = 0x20
UNDERGROUND_MISSILE_SILO_CODE = 0x22
UNDERGROUND_SUBWAY_STATION_CODE = 0x23


# =============================================================================
# ZONES (XZON)
# =============================================================================

ZONE_TYPES = {
    0: "none",
    1: "light_residential",
    2: "dense_residential",
    3: "light_commercial",
    4: "dense_commercial",
    5: "light_industrial",
    6: "dense_industrial",
    7: "military",
    8: "airport",
    9: "seaport",
}

# Corner bit masks: (NW, SW, SE, NE)
ZONE_CORNER_BITS = {
    DIALECT_MAC_DOS: (0x80, 0x40, 0x20, 0x10),
    DIALECT_WIN95: (0x08, 0x01, 0x02, 0x04),
}


def zone_name(zone_type: int) -> str:
    """Zone type number -> name ('unknown' for 10-15)."""
    return ZONE_TYPES.get(zone_type, "unknown")


# =============================================================================
# TILE TEXT (XTXT)
# =============================================================================

TEXT_SIGN = "sign"
TEXT_MICROSIM = "microsim"
TEXT_NEIGHBOR = "neighbor"
TEXT_DISASTER = "disaster"
TEXT_OTHER = "other"

TEXT_SIGN_LAST = 0x32
TEXT_MICROSIM_FIRST = 0x34
TEXT_MICROSIM_LAST = 0xC8
TEXT_NEIGHBOR_CODE = 0xFA
TEXT_DISASTER_FIRST = 0xFB


# =============================================================================
# LABELS / MICROSIMS
# =============================================================================

LABEL_COUNT = 256
LABEL_SLOT_SIZE = 25     # 1 length byte + 24 characters
LABEL_MAX_LENGTH = 24

MICROSIM_COUNT = 150
MICROSIM_SIZE = 8        # type, value1, 3 x uint16 LE

CITY_NAME_MAX_LENGTH = 31


# =============================================================================
# CITY LEDGER (MISC)
# =============================================================================

MISC_FIELDS = {
    "header":               0x0000,   # uint32: first word of the ledger
    "city_mode":            0x0004,
    "rotation":             0x0008,
    "founded":              0x000C,   # founding year
    "city_age":             0x0010,   # days elapsed
    "money":                0x0014,
    "bonds":                0x0018,
    "game_level":           0x001C,
    "city_status":          0x0020,
    "city_value":           0x0024,
    "land_value":           0x0028,
    "crime_count":          0x002C,
    "traffic_count":        0x0030,
    "pollution":            0x0034,
    "city_fame":            0x0038,
    "advertising":          0x003C,
    "garbage":              0x0040,
    "workforce_percent":    0x0044,
    "workforce_le":         0x0048,
    "workforce_eq":         0x004C,
    "national_population":  0x0050,
    "national_value":       0x0054,
    "national_tax":         0x0058,
    "national_trend":       0x005C,
    "heat":                 0x0060,
    "wind":                 0x0064,
    "humidity":             0x0068,
    "weather_trend":        0x006C,
    "disasters":            0x0070,
    "residential_population": 0x0074,
    "populated_tiles":      0x05F0,
    "residential_tiles":    0x05F8,
    "commercial_tiles":     0x0600,
    "industrial_tiles":     0x0608,
    "residential_demand":   0x0718,
    "commercial_demand":    0x071C,
    "industrial_demand":    0x0720,
    "sea_level":            0x0E40,   # 0-31 altitude index
    "terrain_coast":        0x0E44,
    "terrain_river":        0x0E48,
    "speed":                0x0FEC,
    "auto_budget":          0x0FF0,
    "auto_goto":            0x0FF4,
    "sound":                0x0FF8,
    "music":                0x0FFC,
    "no_disasters":         0x1000,
    "view_x":               0x1018,
    "view_y":               0x101C,
    "arco_population":      0x1020,
    "normal_population":    0x102C,
}

# Read as unsigned; everything else is int32
MISC_UNSIGNED = frozenset({"header"})

MISC_BUILDING_COUNTS = 0x01F0     # 256 x int32
BUILDING_COUNT_SLOTS = 256


# =============================================================================
# BUILDING CODES (XBLD)
# =============================================================================

# Ordered, disjoint (first, last, category) ranges
BUILDING_RANGES = (
    (0x06, 0x0C, "tree"),
    (0x0E, 0x1C, "powerline"),
    (0x1D, 0x2B, "road"),
    (0x2C, 0x3E, "rail"),
    (0x3F, 0x40, "tunnel"),
    (0x41, 0x48, "crossover"),
    (0x49, 0x69, "highway"),
    (0x70, 0x7B, "residential_1x1"),
    (0x7C, 0x83, "commercial_1x1"),
    (0x84, 0x87, "industrial_1x1"),
    (0x8C, 0x93, "residential_2x2"),
    (0x94, 0x9D, "commercial_2x2"),
    (0x9E, 0xA5, "industrial_2x2"),
    (0xAE, 0xB1, "residential_3x3"),
    (0xB2, 0xBB, "commercial_3x3"),
    (0xBC, 0xC1, "industrial_3x3"),
    (0xC9, 0xCF, "powerplant_4x4"),
    (0xD0, 0xDA, "civic"),
    (0xFB, 0xFE, "arcology_4x4"),
)

BUILDING_OTHER = "other"
CIVIC_DEFAULT_SIZE = 3
# Stadium, prison, college, zoo
CIVIC_4X4_CODES = frozenset(range(0xD7, 0xDB))

# Codes below this are infrastructure, never part of a multi-tile building
FIRST_REAL_BUILDING = 0x70
MAX_FOOTPRINT = 4
