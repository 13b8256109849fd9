#!/usr/bin/env python
"""
SimCity 2000 Segment Dumper
============================
List the IFF segments of a city save file and optionally extract them.

Usage:
  python segment_dump.py CITY.SC2                  # Segment table
  python segment_dump.py CITY.SC2 -x out/          # Write each decoded segment to out/TAG.bin
  python segment_dump.py CITY.SC2 --raw -x out/    # Write segments as stored (no RLE decoding)
  python segment_dump.py *.SC2                     # Batch listing
"""

import sys
import os
import argparse
import glob

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sc2k.compression import rle_decompress
from sc2k.constants import HEADER_SIZE, RAW_SEGMENTS, SEGMENT_NAMES
from sc2k.container import check_header, header_length, iter_segments
from sc2k.errors import Sc2kError


def dump_file(path, extract_dir=None, raw=False):
    with open(path, 'rb') as f:
        data = f.read()

    check_header(data)
    declared = header_length(data)
    print(f"\n  {path}: {len(data):,} bytes (header length {declared + 8:,})")
    fmt = "  {:<6} {:>8}  {:>8}  {:>8}  {}"
    print(fmt.format("Tag", "Offset", "Stored", "Decoded", "Description"))
    print(fmt.format("---", "---", "---", "---", "---"))

    for tag, offset, content in iter_segments(data[HEADER_SIZE:]):
        if tag in RAW_SEGMENTS:
            decoded = content
        else:
            try:
                decoded = rle_decompress(content)
            except Sc2kError as e:
                print(f"  {tag:<6} 0x{offset:06X}  ERROR: {e}", file=sys.stderr)
                continue
        desc = SEGMENT_NAMES.get(tag, "(unknown)")
        print(fmt.format(tag, f"0x{offset:06X}", len(content), len(decoded), desc))

        if extract_dir:
            os.makedirs(extract_dir, exist_ok=True)
            out_path = os.path.join(extract_dir, f"{tag}.bin")
            with open(out_path, 'wb') as f:
                f.write(content if raw else decoded)


def main():
    p = argparse.ArgumentParser(description='SimCity 2000 Segment Dumper')
    p.add_argument('files', nargs='+', help='City save file(s)')
    p.add_argument('-x', '--extract', default=None, metavar='DIR',
                   help='Write each segment to DIR/TAG.bin')
    p.add_argument('--raw', action='store_true',
                   help='Extract segments as stored, without RLE decoding')
    args = p.parse_args()

    # Expand globs on Windows
    files = []
    for pattern in args.files:
        expanded = glob.glob(pattern)
        files.extend(expanded if expanded else [pattern])

    status = 0
    for path in files:
        try:
            dump_file(path, args.extract, args.raw)
        except Sc2kError as e:
            print(f"  ERROR {path}: {e}", file=sys.stderr)
            status = 1
    return status


if __name__ == '__main__':
    sys.exit(main())
