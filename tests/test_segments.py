import struct

import pytest

from sc2k.constants import DIALECT_WIN95, TILE_COUNT
from sc2k.errors import UNEXPECTED_SEGMENT_LENGTH
from sc2k.model import City, Corners
from sc2k.segments import (
    SEGMENT_INTERPRETERS, decode_terrain, decode_text, decode_underground,
    decode_zone, interpret_segment,
)

FLAT = Corners(False, False, False, False)


def altm(words):
    data = bytearray(TILE_COUNT * 2)
    for i, w in words.items():
        struct.pack_into('>H', data, i * 2, w)
    return bytes(data)


# -- ALTM --

def test_altm_mac_dos(city):
    interpret_segment('ALTM', altm({0: 0x0085, 1: 0x001F}), city)
    assert city.tiles[0].altitude == 550
    assert city.tiles[0].is_water is True
    assert city.tiles[1].altitude == 3150
    assert city.tiles[1].is_water is False
    assert city.tiles[2].altitude == 50
    assert city.warnings == []


def test_altm_win95():
    city = City(dialect=DIALECT_WIN95)
    interpret_segment('ALTM', altm({0: (7 << 10) | (3 << 5) | 2}), city)
    tile = city.tiles[0]
    assert tile.altitude == 750
    assert tile.water_height == 3
    assert tile.tunnel_level == 2
    assert tile.is_water is None


# -- XBIT --

def test_xbit_flags(city):
    interpret_segment('XBIT', bytes([0xA5]) + bytes(TILE_COUNT - 1), city)
    t = city.tiles[0]
    assert (t.powerable, t.powered, t.piped, t.watered) == (True, False, True, False)
    assert (t.xval_mask, t.water_covered, t.rotate, t.is_salt_water) == (False, True, False, True)
    assert city.tiles[1].powerable is False


# -- XTER --

def test_terrain_waterfall():
    t = decode_terrain(0x3E)
    assert t.slope == FLAT
    assert t.water_level == 'waterfall'
    assert t.open_sides is None


def test_terrain_surface_open_sides():
    t = decode_terrain(0x45)
    assert t.slope == FLAT
    assert t.water_level == 'surface'
    assert t.open_sides == (True, True, True, False)


def test_terrain_out_of_range_is_empty():
    t = decode_terrain(0x46)
    assert t.is_empty
    assert t.open_sides is None


def test_terrain_slope_and_wetness():
    t = decode_terrain(0x21)
    assert t.slope == Corners(True, True, False, False)
    assert t.water_level == 'shore'


def test_terrain_full_raise():
    assert decode_terrain(0x0D).slope == Corners(True, True, True, True)


def test_terrain_unknown_slope_nibble():
    t = decode_terrain(0x0E)
    assert t.slope is None
    assert t.water_level == 'dry'


def test_xter_sets_every_tile(city, grid):
    interpret_segment('XTER', grid({(5, 0): 0x3E}), city)
    assert city.tile(5, 0).water_level == 'waterfall'
    assert city.tile(0, 0).water_level == 'dry'
    assert city.tile(0, 0).terrain_slope == FLAT


# -- XUND --

@pytest.mark.parametrize('square, kind, slope, pipe_vertical', [
    (0x00, 'none', FLAT, None),
    (0x05, 'subway', Corners(True, True, False, True), None),
    (0x13, 'pipes', Corners(False, False, True, True), None),
    (0x1F, 'crossover', FLAT, True),
    (0x20, 'crossover', FLAT, False),
    (0x21, 'none', FLAT, None),
    (0x22, 'missile_silo', FLAT, None),
    (0x23, 'subway_station', FLAT, None),
    (0x80, 'none', FLAT, None),
])
def test_underground(square, kind, slope, pipe_vertical):
    u = decode_underground(square)
    assert u.kind == kind
    assert u.slope == slope
    assert u.pipe_vertical is pipe_vertical


# -- XZON --

def test_zone_mac_dos():
    z = decode_zone(0xA3, 'mac_dos')
    assert z.type == 3
    assert z.name == 'light_commercial'
    assert (z.nw, z.sw, z.se, z.ne) == (True, False, True, False)


def test_zone_unknown_type():
    assert decode_zone(0x0C, 'mac_dos').name == 'unknown'


def test_zone_win95():
    z = decode_zone(0x39, DIALECT_WIN95)
    assert z.type == 3
    assert (z.nw, z.sw, z.se, z.ne) == (True, True, False, False)


def test_xzon_follows_city_dialect(grid):
    city = City(dialect=DIALECT_WIN95)
    interpret_segment('XZON', grid({(0, 0): 0x90}), city)
    assert city.tiles[0].zone.type == 9
    assert city.tiles[0].zone.name == 'seaport'


# -- XTXT --

@pytest.mark.parametrize('square, kind, index', [
    (0x01, 'sign', 1),
    (0x32, 'sign', 0x32),
    (0x33, 'other', None),
    (0x34, 'microsim', 0),
    (0xC8, 'microsim', 0x94),
    (0xC9, 'other', None),
    (0xFA, 'neighbor', None),
    (0xFB, 'disaster', None),
    (0xFF, 'disaster', None),
])
def test_text(square, kind, index):
    t = decode_text(square)
    assert t.kind == kind
    assert t.index == index
    assert t.code == square


def test_text_zero_is_none():
    assert decode_text(0) is None


# -- CNAM / XLAB / XMIC --

def test_city_name(city):
    interpret_segment('CNAM', b'\x05HelloXYZ', city)
    assert city.name == 'Hello'


def test_city_name_clamped(city):
    interpret_segment('CNAM', bytes([40]) + b'N' * 40, city)
    assert city.name == 'N' * 31


def test_city_name_empty_segment(city):
    interpret_segment('CNAM', b'', city)
    assert city.name is None
    assert city.warnings[0].kind == UNEXPECTED_SEGMENT_LENGTH


def test_labels(city):
    data = bytearray(256 * 25)
    data[0:8] = b'\x07Main St'
    data[3 * 25] = 30
    data[3 * 25 + 1:4 * 25] = b'L' * 24
    interpret_segment('XLAB', bytes(data), city)
    assert len(city.labels) == 256
    assert city.labels[0] == 'Main St'
    assert city.labels[1] == ''
    assert city.labels[3] == 'L' * 24


def test_microsims(city):
    data = bytearray(150 * 8)
    struct.pack_into('<BBHHH', data, 8, 0x91, 7, 1000, 2, 65535)
    interpret_segment('XMIC', bytes(data), city)
    assert len(city.microsims) == 150
    m = city.microsims[1]
    assert (m.building_type, m.value1, m.value2, m.value3, m.value4) == (0x91, 7, 1000, 2, 65535)


# -- MISC --

def misc(values, size=4800):
    data = bytearray(size)
    for offset, fmt, value in values:
        struct.pack_into(fmt, data, offset, value)
    return bytes(data)


def test_misc_ledger(city):
    data = misc([
        (0x0000, '>I', 0xFFFFFFFF),
        (0x0010, '>i', 365),
        (0x0014, '>i', -5000),
        (0x0718, '>i', 1200),
        (0x0FEC, '>i', 2),
        (0x1018, '>i', 64),
        (0x1020, '>i', 100),
        (0x102C, '>i', 2500),
        (0x01F0 + 0x8C * 4, '>i', 42),
    ])
    interpret_segment('MISC', data, city)
    led = city.ledger
    assert led.header == 0xFFFFFFFF
    assert led.city_age == 365
    assert led.money == -5000
    assert led.residential_demand == 1200
    assert led.speed == 2
    assert led.view_x == 64
    assert led.population == 2600
    assert city.population == 2600
    assert len(led.building_counts) == 256
    assert led.building_counts[0x8C] == 42
    assert city.warnings == []


def test_misc_short_segment(city):
    interpret_segment('MISC', misc([(0x0014, '>i', 777)], size=0x20), city)
    assert city.ledger.money == 777
    assert city.ledger.view_x is None
    assert city.ledger.population is None
    assert city.ledger.building_counts == [None] * 256
    assert [w.kind for w in city.warnings] == [UNEXPECTED_SEGMENT_LENGTH]


# -- Minimaps / opaque --

def test_minimap_stored(city):
    interpret_segment('XTRF', bytes(range(256)) * 16, city)
    assert city.minimap('XTRF') == bytes(range(256)) * 16
    assert city.warnings == []


def test_minimap_wrong_size(city):
    interpret_segment('XPLC', b'\x01' * 1000, city)
    assert len(city.minimap('XPLC')) == 1000
    assert city.warnings[0].tag == 'XPLC'


def test_minimap_value_scales_to_grid(city):
    data = bytearray(32 * 32)
    data[1 * 32 + 2] = 99
    interpret_segment('XPLC', bytes(data), city)
    assert city.minimap_value('XPLC', 8, 4) == 99
    assert city.minimap_value('XPLC', 11, 7) == 99
    assert city.minimap_value('XPLC', 12, 4) == 0
    assert city.minimap_value('XFIR', 0, 0) is None


def test_graphs_and_things(city):
    interpret_segment('XGRP', b'graph', city)
    interpret_segment('XTHG', b'things', city)
    assert city.graphs == b'graph'
    assert city.things == b'things'


def test_unknown_tag_kept(city):
    interpret_segment('ZZZZ', b'xy', city)
    assert city.unknown_segments == {'ZZZZ': b'xy'}
    assert city.warnings == []


# -- Length handling --

def test_short_tile_segment_stops_early(city):
    interpret_segment('XBLD', b'\x8C' * 100, city)
    assert city.tiles[99].building_code == 0x8C
    assert city.tiles[100].building_code is None
    assert len(city.warnings) == 1
    assert city.warnings[0].kind == UNEXPECTED_SEGMENT_LENGTH


def test_long_tile_segment_ignores_tail(city):
    interpret_segment('XTXT', b'\x01' * (TILE_COUNT + 10), city)
    assert city.tiles[-1].text.kind == 'sign'
    assert len(city.tiles) == TILE_COUNT
    assert len(city.warnings) == 1


def test_odd_altm_length(city):
    interpret_segment('ALTM', b'\x00\x01\x00', city)
    assert city.tiles[0].altitude == 150
    assert city.tiles[1].altitude is None


def test_registry_covers_known_tags():
    for tag in ('ALTM', 'CNAM', 'XBIT', 'XBLD', 'XTER', 'XUND', 'XZON', 'XTXT',
                'XLAB', 'XMIC', 'MISC', 'XTRF', 'XPLT', 'XVAL', 'XCRM',
                'XPLC', 'XFIR', 'XPOP', 'XROG'):
        assert tag in SEGMENT_INTERPRETERS
