"""
sc2k-re: Decoded city model.

One City per decode call. Every per-tile sub-feature is optional so that
"segment missing from the file" reads as "field is None".
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence

from .constants import (
    BUILDING_COUNT_SLOTS, DIALECT_MAC_DOS, GRID_SIZE, MINIMAPS, TILE_COUNT,
    TEXT_SIGN, zone_name,
)
from .errors import SegmentWarning


class Corners(NamedTuple):
    """Per-corner flags of one tile (True = raised for slopes)."""
    nw: bool
    ne: bool
    sw: bool
    se: bool


@dataclass
class Terrain:
    """XTER record. All None when the byte is outside the known ranges."""
    slope: Optional[Corners] = None
    water_level: Optional[str] = None
    open_sides: Optional[tuple] = None

    @property
    def is_empty(self):
        return self.slope is None and self.water_level is None


@dataclass
class Underground:
    kind: str
    slope: Corners
    # Only set for crossovers: True when the pipe runs top-bottom
    pipe_vertical: Optional[bool] = None


@dataclass
class Zone:
    type: int
    nw: bool
    sw: bool
    se: bool
    ne: bool

    @property
    def name(self):
        return zone_name(self.type)

    @property
    def corners(self):
        return Corners(self.nw, self.ne, self.sw, self.se)


@dataclass
class TextRef:
    """XTXT reference. index is set for signs and microsims only."""
    kind: str
    code: int
    index: Optional[int] = None


@dataclass(frozen=True)
class MultiTileRef:
    """Back-reference from a member tile to City.buildings[index]."""
    index: int
    origin_x: int
    origin_y: int
    width: int
    height: int


@dataclass(frozen=True)
class MultiTileBuilding:
    x: int
    y: int
    width: int
    height: int
    building_code: int


@dataclass
class Microsim:
    building_type: int
    value1: int
    value2: int
    value3: int
    value4: int


@dataclass
class Tile:
    x: int
    y: int

    # ALTM
    altitude: Optional[int] = None
    is_water: Optional[bool] = None
    tunnel_level: Optional[int] = None     # win95 dialect only
    water_height: Optional[int] = None     # win95 dialect only

    # XBIT
    powerable: Optional[bool] = None
    powered: Optional[bool] = None
    piped: Optional[bool] = None
    watered: Optional[bool] = None
    xval_mask: Optional[bool] = None
    water_covered: Optional[bool] = None
    rotate: Optional[bool] = None
    is_salt_water: Optional[bool] = None

    terrain: Optional[Terrain] = None
    underground: Optional[Underground] = None
    zone: Optional[Zone] = None
    text: Optional[TextRef] = None

    # XBLD + finishing passes
    building_code: Optional[int] = None
    building_type: Optional[str] = None
    building_footprint: Optional[int] = None
    multi_tile_ref: Optional[MultiTileRef] = None

    @property
    def index(self):
        return self.y * GRID_SIZE + self.x

    @property
    def water_level(self):
        return self.terrain.water_level if self.terrain else None

    @property
    def terrain_slope(self):
        return self.terrain.slope if self.terrain else None

    @property
    def surface_water_open_sides(self):
        return self.terrain.open_sides if self.terrain else None

    @property
    def has_building(self):
        return bool(self.building_code)


@dataclass
class Ledger:
    """MISC city-wide scalars. Fields absent from a short segment stay None."""
    header: Optional[int] = None
    city_mode: Optional[int] = None
    rotation: Optional[int] = None
    founded: Optional[int] = None
    city_age: Optional[int] = None
    money: Optional[int] = None
    bonds: Optional[int] = None
    game_level: Optional[int] = None
    city_status: Optional[int] = None
    city_value: Optional[int] = None
    land_value: Optional[int] = None
    crime_count: Optional[int] = None
    traffic_count: Optional[int] = None
    pollution: Optional[int] = None
    city_fame: Optional[int] = None
    advertising: Optional[int] = None
    garbage: Optional[int] = None
    workforce_percent: Optional[int] = None
    workforce_le: Optional[int] = None
    workforce_eq: Optional[int] = None
    national_population: Optional[int] = None
    national_value: Optional[int] = None
    national_tax: Optional[int] = None
    national_trend: Optional[int] = None
    heat: Optional[int] = None
    wind: Optional[int] = None
    humidity: Optional[int] = None
    weather_trend: Optional[int] = None
    disasters: Optional[int] = None
    residential_population: Optional[int] = None
    populated_tiles: Optional[int] = None
    residential_tiles: Optional[int] = None
    commercial_tiles: Optional[int] = None
    industrial_tiles: Optional[int] = None
    residential_demand: Optional[int] = None
    commercial_demand: Optional[int] = None
    industrial_demand: Optional[int] = None
    sea_level: Optional[int] = None
    terrain_coast: Optional[int] = None
    terrain_river: Optional[int] = None
    speed: Optional[int] = None
    auto_budget: Optional[int] = None
    auto_goto: Optional[int] = None
    sound: Optional[int] = None
    music: Optional[int] = None
    no_disasters: Optional[int] = None
    view_x: Optional[int] = None
    view_y: Optional[int] = None
    arco_population: Optional[int] = None
    normal_population: Optional[int] = None
    building_counts: List[Optional[int]] = field(
        default_factory=lambda: [None] * BUILDING_COUNT_SLOTS)

    @property
    def population(self):
        if self.normal_population is None and self.arco_population is None:
            return None
        return (self.normal_population or 0) + (self.arco_population or 0)

    @property
    def sea_level_feet(self):
        if self.sea_level is None:
            return None
        return self.sea_level * 100 + 50


def _blank_tiles():
    return [Tile(i % GRID_SIZE, i // GRID_SIZE) for i in range(TILE_COUNT)]


@dataclass
class City:
    """Fully decoded save file."""
    dialect: str = DIALECT_MAC_DOS
    name: Optional[str] = None
    tiles: Sequence[Tile] = field(default_factory=_blank_tiles)
    ledger: Ledger = field(default_factory=Ledger)
    labels: List[str] = field(default_factory=list)
    microsims: List[Microsim] = field(default_factory=list)
    minimaps: Dict[str, bytes] = field(default_factory=dict)
    graphs: Optional[bytes] = None
    things: Optional[bytes] = None
    unknown_segments: Dict[str, bytes] = field(default_factory=dict)
    buildings: Sequence[MultiTileBuilding] = field(default_factory=list)
    warnings: List[SegmentWarning] = field(default_factory=list)

    # -- Tile queries --

    def tile(self, x, y) -> Tile:
        if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
            raise IndexError(f"tile ({x}, {y}) outside {GRID_SIZE}x{GRID_SIZE} grid")
        return self.tiles[y * GRID_SIZE + x]

    def tiles_where(self, pred: Callable[[Tile], bool]) -> Iterator[Tile]:
        return (t for t in self.tiles if pred(t))

    def building_at(self, x, y) -> Optional[MultiTileBuilding]:
        ref = self.tile(x, y).multi_tile_ref
        return self.buildings[ref.index] if ref else None

    def count_by_building_type(self) -> Dict[str, int]:
        """Tile count per building category (tiles without a building skipped)."""
        counts = {}
        for t in self.tiles:
            if t.building_type:
                counts[t.building_type] = counts.get(t.building_type, 0) + 1
        return counts

    def tile_label(self, x, y) -> Optional[str]:
        """Label text for a tile carrying a sign reference."""
        text = self.tile(x, y).text
        if text is None or text.kind != TEXT_SIGN:
            return None
        if text.index >= len(self.labels):
            return None
        return self.labels[text.index]

    # -- Minimaps --

    def minimap(self, tag) -> Optional[bytes]:
        return self.minimaps.get(tag)

    def minimap_value(self, tag, x, y) -> Optional[int]:
        """Minimap cell covering main-grid tile (x, y)."""
        data = self.minimaps.get(tag)
        if data is None:
            return None
        side = MINIMAPS[tag][1]
        scale = GRID_SIZE // side
        idx = (y // scale) * side + (x // scale)
        return data[idx] if idx < len(data) else None

    # -- Scalars --

    @property
    def population(self):
        return self.ledger.population

    @property
    def money(self):
        return self.ledger.money
