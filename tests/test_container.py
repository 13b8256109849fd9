import struct

import pytest

from sc2k.container import is_city_file, iter_segments, split_segments
from sc2k.errors import TruncatedContainer, TruncatedInput


def test_is_city_file(city_file):
    assert is_city_file(city_file([]))


@pytest.mark.parametrize('data', [
    b'',
    b'FORM',
    b'FORM\x00\x00\x00\x04SCDX',
    b'MROF\x00\x00\x00\x04SCDH',
])
def test_is_city_file_rejects(data):
    assert not is_city_file(data)


def test_is_city_file_does_not_mutate(city_file):
    data = bytearray(city_file([('XBLD', b'\x01\x02')]))
    before = bytes(data)
    is_city_file(data)
    assert bytes(data) == before


def test_split_recovers_segments(segment):
    stream = (segment('XBLD', b'\x00' * 100 + b'\x8C\x8C')
              + segment('CNAM', b'\x04Test')
              + segment('XLAB', b'abc' * 10))
    assert split_segments(stream) == {
        'XBLD': b'\x00' * 100 + b'\x8C\x8C',
        'CNAM': b'\x04Test',
        'XLAB': b'abc' * 10,
    }


def test_raw_segments_are_not_decompressed(segment):
    # 0x90 as an RLE control byte would need a following byte
    stream = segment('ALTM', b'\x00\x90') + segment('CNAM', b'\x90')
    assert split_segments(stream) == {'ALTM': b'\x00\x90', 'CNAM': b'\x90'}


def test_empty_stream():
    assert split_segments(b'') == {}


def test_duplicate_tag_keeps_last(segment):
    stream = segment('XTXT', b'first') + segment('XTXT', b'second')
    assert split_segments(stream) == {'XTXT': b'second'}


def test_iter_segments_reports_file_offsets(segment):
    stream = segment('CNAM', b'\x01A') + segment('ALTM', b'\x00\x01')
    tags = [(tag, offset) for tag, offset, _ in iter_segments(stream)]
    assert tags == [('CNAM', 12), ('ALTM', 12 + 8 + 2)]


def test_truncated_last_segment(segment):
    stream = segment('CNAM', b'\x01A') + b'XBLD' + struct.pack('>I', 100) + b'\x05' * 10
    with pytest.raises(TruncatedContainer) as exc:
        split_segments(stream)
    assert exc.value.tag == 'XBLD'
    assert exc.value.declared == 100
    assert exc.value.available == 10


def test_truncated_segment_prefix(segment):
    stream = segment('CNAM', b'\x01A') + b'XBL'
    with pytest.raises(TruncatedContainer):
        split_segments(stream)


def test_broken_rle_raises_without_callback(segment):
    stream = segment('XBLD', bytes([5, 1]), compress=False)
    with pytest.raises(TruncatedInput):
        split_segments(stream)


def test_broken_rle_reported_and_skipped(segment):
    stream = (segment('XBLD', bytes([5, 1]), compress=False)
              + segment('XZON', b'\x01\x02\x03'))
    errors = []
    segments = split_segments(stream, on_error=lambda tag, e: errors.append((tag, e)))
    assert segments == {'XZON': b'\x01\x02\x03'}
    assert [tag for tag, _ in errors] == ['XBLD']
    assert isinstance(errors[0][1], TruncatedInput)
