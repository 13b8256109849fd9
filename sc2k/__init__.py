"""sc2k-re shared library."""
from .compression import rle_decompress, rle_compress  # noqa: F401
from .constants import (  # noqa: F401
    DIALECT_MAC_DOS, DIALECT_WIN95, GRID_SIZE, TILE_COUNT, SEGMENT_NAMES,
)
from .container import is_city_file, split_segments, iter_segments  # noqa: F401
from .buildings import (  # noqa: F401
    building_class, building_category, building_size, find_multi_tile_buildings,
)
from .decoder import decode_city, decode_segments  # noqa: F401
from .errors import (  # noqa: F401
    Sc2kError, InvalidHeader, TruncatedContainer, TruncatedInput, SegmentWarning,
)
from .model import City, Tile, MultiTileBuilding, MultiTileRef  # noqa: F401
