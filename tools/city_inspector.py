#!/usr/bin/env python
"""
SimCity 2000 City Inspector
============================
Decode a city save file and print what it contains.

Usage:
  python city_inspector.py CITY.SC2                   # Show summary
  python city_inspector.py CITY.SC2 --ledger          # All MISC ledger fields
  python city_inspector.py CITY.SC2 --tile 10,12      # One tile in detail
  python city_inspector.py CITY.SC2 --buildings       # Multi-tile buildings
  python city_inspector.py CITY.SC2 --zones           # Zoned tile counts
  python city_inspector.py CITY.SC2 --labels          # Non-empty labels
  python city_inspector.py CITY.SC2 --microsims       # Microsimulator table
  python city_inspector.py CITY.SC2 --dialect win95   # Use the Win95 ALTM/XZON layout
"""

import sys
import argparse
import logging
import os
from collections import Counter
from dataclasses import fields

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sc2k.buildings import building_class
from sc2k.constants import DIALECTS, DIALECT_MAC_DOS, TILE_COUNT, zone_name
from sc2k.decoder import decode_city
from sc2k.errors import Sc2kError
from sc2k.model import Ledger


def corner_str(corners):
    if corners is None:
        return '-'
    return ''.join(name.upper() if on else '.' for name, on in zip(corners._fields, corners))


# =============================================================================
# DISPLAY FUNCTIONS
# =============================================================================

def show_summary(city, path):
    led = city.ledger
    print(f"\n{'='*60}")
    print(f" City: {city.name or '(unnamed)'}")
    print(f" File: {path}   dialect: {city.dialect}")
    print(f"{'='*60}\n")
    print(f"  Founded:         {led.founded if led.founded is not None else '?'}")
    print(f"  Days elapsed:    {led.city_age if led.city_age is not None else '?'}")
    if led.money is not None:
        print(f"  Treasury:        ${led.money:,}  (bonds: {led.bonds})")
    if led.population is not None:
        print(f"  Population:      {led.population:,}  (arcologies: {led.arco_population or 0:,})")
    if led.residential_demand is not None:
        print(f"  Demand R/C/I:    {led.residential_demand} / {led.commercial_demand} / {led.industrial_demand}")
    if led.sea_level is not None:
        print(f"  Sea level:       {led.sea_level} ({led.sea_level_feet} ft)")

    altitudes = [t.altitude for t in city.tiles if t.altitude is not None]
    if altitudes:
        print(f"  Altitude range:  {min(altitudes)} - {max(altitudes)} ft")
    water = sum(1 for t in city.tiles if t.is_water)
    print(f"  Water tiles:     {water:,} / {TILE_COUNT:,}")
    built = sum(1 for t in city.tiles if t.has_building)
    print(f"  Building tiles:  {built:,}")
    print(f"  Multi-tile bldg: {len(city.buildings)}")
    print(f"  Labels:          {sum(1 for s in city.labels if s)}")
    print(f"  Minimaps:        {', '.join(sorted(city.minimaps)) or '-'}")
    if city.unknown_segments:
        print(f"  Unknown tags:    {', '.join(sorted(city.unknown_segments))}")
    if city.warnings:
        print(f"\n  Warnings ({len(city.warnings)}):")
        for w in city.warnings:
            print(f"    {w}")


def show_ledger(city):
    print(f"\n=== City ledger (MISC) ===")
    for f in fields(Ledger):
        if f.name == 'building_counts':
            continue
        print(f"  {f.name:<24} {getattr(city.ledger, f.name)}")
    print(f"  {'population':<24} {city.ledger.population}")
    counts = [(code, n) for code, n in enumerate(city.ledger.building_counts) if n]
    if counts:
        print(f"\n  Building counts ({len(counts)} codes):")
        for code, n in counts:
            print(f"    0x{code:02X}  {building_class(code) or '-':<18} {n}")


def show_tile(city, x, y):
    t = city.tile(x, y)
    print(f"\n=== Tile ({x}, {y}) #{t.index} ===")
    print(f"  Altitude:     {t.altitude} ft  water={t.is_water}  salt={t.is_salt_water}")
    if t.tunnel_level is not None:
        print(f"  Tunnel/water: {t.tunnel_level} / {t.water_height}")
    if t.terrain is not None:
        print(f"  Terrain:      slope={corner_str(t.terrain.slope)}  level={t.water_level}"
              f"  open={t.surface_water_open_sides}")
    if t.underground is not None:
        u = t.underground
        extra = f"  pipe_vertical={u.pipe_vertical}" if u.pipe_vertical is not None else ""
        print(f"  Underground:  {u.kind}  slope={corner_str(u.slope)}{extra}")
    if t.zone is not None:
        print(f"  Zone:         {t.zone.type} = {t.zone.name}  corners={corner_str(t.zone.corners)}")
    print(f"  Power/water:  powerable={t.powerable} powered={t.powered} "
          f"piped={t.piped} watered={t.watered}")
    print(f"  Other bits:   xval_mask={t.xval_mask} water_covered={t.water_covered} rotate={t.rotate}")
    if t.building_code:
        print(f"  Building:     0x{t.building_code:02X} = {building_class(t.building_code)}"
              f"  footprint {t.building_footprint}x{t.building_footprint}")
    if t.multi_tile_ref:
        r = t.multi_tile_ref
        print(f"  Part of:      building #{r.index} at ({r.origin_x}, {r.origin_y}) {r.width}x{r.height}")
    if t.text:
        label = city.tile_label(x, y)
        extra = f" \"{label}\"" if label else ""
        index = f" #{t.text.index}" if t.text.index is not None else ""
        print(f"  Text:         {t.text.kind}{index} (0x{t.text.code:02X}){extra}")


def show_buildings(city):
    print(f"\n=== Multi-tile buildings ({len(city.buildings)}) ===")
    fmt = "{:>4}  {:>3}  {:>3}  {:>4}  {:>4}  {}"
    print(fmt.format("#", "X", "Y", "Size", "Code", "Class"))
    print(fmt.format("---", "---", "---", "---", "---", "---"))
    for i, b in enumerate(city.buildings):
        print(fmt.format(i, b.x, b.y, f"{b.width}x{b.height}", f"{b.building_code:02X}",
                         building_class(b.building_code)))


def show_zones(city):
    counts = Counter(t.zone.type for t in city.tiles if t.zone is not None)
    print(f"\n=== Zones ===")
    for zone_type, n in sorted(counts.items()):
        print(f"  {zone_type:>2}  {zone_name(zone_type):<20} {n:6,}")


def show_labels(city):
    print(f"\n=== Labels ===")
    for i, label in enumerate(city.labels):
        if label:
            print(f"  {i:>3}: {label}")


def show_microsims(city):
    print(f"\n=== Microsimulators ===")
    fmt = "{:>3}  {:>4}  {:>4}  {:>6}  {:>6}  {:>6}"
    print(fmt.format("#", "Type", "V1", "V2", "V3", "V4"))
    for i, m in enumerate(city.microsims):
        if m.building_type == 0:
            continue
        print(fmt.format(i, f"{m.building_type:02X}", m.value1, m.value2, m.value3, m.value4))


# =============================================================================
# MAIN
# =============================================================================

def parse_xy(s):
    x, y = s.split(',', 1)
    return int(x, 0), int(y, 0)


def main():
    p = argparse.ArgumentParser(
        description='SimCity 2000 City Inspector',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s CITY.SC2 --ledger
  %(prog)s CITY.SC2 --tile 64,64
  %(prog)s CITY.SC2 --buildings --dialect win95
        """)
    p.add_argument('file', help='City save file path (e.g. CITY.SC2)')
    p.add_argument('--dialect', choices=DIALECTS, default=DIALECT_MAC_DOS,
                   help='Bit layout of ALTM/XZON (default: %(default)s)')
    p.add_argument('--ledger', action='store_true', help='Show all ledger fields')
    p.add_argument('--tile', type=parse_xy, default=None, metavar='X,Y', help='Show one tile')
    p.add_argument('--buildings', action='store_true', help='List multi-tile buildings')
    p.add_argument('--zones', action='store_true', help='Count zoned tiles per type')
    p.add_argument('--labels', action='store_true', help='List labels')
    p.add_argument('--microsims', action='store_true', help='List microsimulators')
    p.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    args = p.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    with open(args.file, 'rb') as f:
        data = f.read()
    try:
        city = decode_city(data, dialect=args.dialect)
    except Sc2kError as e:
        print(f"  ERROR {args.file}: {e}", file=sys.stderr)
        return 1

    if args.tile is not None:
        try:
            show_tile(city, *args.tile)
        except IndexError as e:
            print(f"  {e}", file=sys.stderr)
            return 1
        return 0
    if args.ledger:     return show_ledger(city)
    if args.buildings:  return show_buildings(city)
    if args.zones:      return show_zones(city)
    if args.labels:     return show_labels(city)
    if args.microsims:  return show_microsims(city)

    show_summary(city, args.file)
    print(f"\n  Use --ledger, --tile X,Y, --buildings, --zones for details.")
    return 0


if __name__ == '__main__':
    sys.exit(main() or 0)
