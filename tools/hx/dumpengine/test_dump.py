import io
import unittest

from hx.dumpengine.config import Configuration
from hx.dumpengine.dump import (
    Chunk,
    Dumper,
    SeekError,
    REDUNDANT_MARKER,
    hexdump,
    read_chunk,
)
from hx.dumpengine.layout import GroupType, select_layout

ALPHABET = bytes(range(0x41, 0x51))  # "A".."P"
LONG = select_layout(GroupType.LONG)


class TrickleIO(object):
    """ returns at most one byte per read """

    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0

    def read(self, size=-1):
        result = self._data[self._pos : self._pos + 1]
        self._pos += len(result)
        return result


class UnseekableIO(io.BytesIO):
    def seek(self, *args, **kwargs):
        raise io.UnsupportedOperation("seek")


class TestChunk(unittest.TestCase):
    CT = Chunk

    def test_init(self):
        actual = self.CT(0x20, ALPHABET)
        self.assertIsInstance(actual, self.CT)
        self.assertEqual(actual.address, 0x20)
        self.assertEqual(actual.length, 16)
        self.assertEqual(len(actual), 16)
        self.assertTrue(actual.is_full)
        self.assertEqual(repr(actual), "[20] 16 bytes")

    def test_truncate_inclusive(self):
        actual = self.CT(0x10, ALPHABET)
        actual.truncate(0x14)
        self.assertEqual(actual.length, 5)
        self.assertFalse(actual.is_full)

    def test_truncate_beyond_chunk(self):
        actual = self.CT(0x10, ALPHABET[:4])
        actual.truncate(0x1E)
        self.assertEqual(actual.length, 4)

    def test_truncate_before_chunk(self):
        actual = self.CT(0x40, ALPHABET)
        actual.truncate(0x3F)
        self.assertEqual(actual.length, 0)

    def test_read_chunk_short_reads(self):
        stream = TrickleIO(ALPHABET * 2)
        actual = read_chunk(stream, 0)
        self.assertEqual(actual.data, ALPHABET)
        actual = read_chunk(stream, 16)
        self.assertEqual(actual.data, ALPHABET)
        actual = read_chunk(stream, 32)
        self.assertEqual(actual.length, 0)


class TestHexdump(unittest.TestCase):
    def dump(self, data: bytes, **kwargs):
        return hexdump(io.BytesIO(data), Configuration(**kwargs))

    def test_alphabet_bytes(self):
        actual = self.dump(ALPHABET, grouping=GroupType.BYTE)
        assert actual == [
            "41 42 43 44  45 46 47 48  49 4a 4b 4c  4d 4e 4f 50"
            "  # 00000000  ABCDEFGHIJKLMNOP\n"
        ]

    def test_default_grouping_is_long(self):
        actual = self.dump(ALPHABET)
        assert actual == [LONG.render(0, ALPHABET)]

    def test_empty_stream(self):
        self.assertEqual(self.dump(b""), [])

    def test_partial_last_line(self):
        data = ALPHABET + b"xyz"
        actual = self.dump(data)
        assert actual == [LONG.render(0, ALPHABET), LONG.render(16, b"xyz")]

    def test_short_reads(self):
        actual = hexdump(TrickleIO(ALPHABET * 2), Configuration())
        assert actual == [LONG.render(0, ALPHABET), LONG.render(16, ALPHABET)]

    def test_inverted_range(self):
        data = bytes(range(256))
        self.assertEqual(self.dump(data, start_address=0x20, end_address=0x10), [])
        self.assertEqual(self.dump(data, start_address=0x20, end_address=0x20), [])

    def test_start_address(self):
        data = bytes(range(64))
        actual = self.dump(data, start_address=0x25)
        assert actual == [
            LONG.render(0x25, data[0x25:0x35]),
            LONG.render(0x35, data[0x35:0x40]),
        ]

    def test_start_beyond_end_of_stream(self):
        self.assertEqual(self.dump(ALPHABET, start_address=1000), [])

    def test_end_address_is_inclusive(self):
        data = bytes(range(64))
        actual = self.dump(data, end_address=0x14)
        assert actual == [LONG.render(0, data[0:16]), LONG.render(0x10, data[0x10:0x15])]

    def test_end_on_line_boundary(self):
        data = bytes(range(64))
        actual = self.dump(data, end_address=0x20)
        assert actual == [LONG.render(0, data[0:16]), LONG.render(0x10, data[0x10:0x20])]

    def test_end_address_past_stream(self):
        actual = self.dump(ALPHABET, end_address=0x1000)
        assert actual == [LONG.render(0, ALPHABET)]

    def test_start_and_end(self):
        data = bytes(range(64))
        actual = self.dump(data, start_address=5, end_address=0x14)
        assert actual == [LONG.render(5, data[5:0x15])]

    def test_seek_failure(self):
        with self.assertRaises(SeekError):
            hexdump(UnseekableIO(ALPHABET), Configuration(start_address=4))

    def test_no_seek_without_start(self):
        actual = hexdump(UnseekableIO(ALPHABET), Configuration())
        assert actual == [LONG.render(0, ALPHABET)]

    def test_seek_failure_is_lazy(self):
        lines = Dumper(Configuration(start_address=4)).lines(UnseekableIO(ALPHABET))
        with self.assertRaises(SeekError):
            next(lines)

    def test_all_byte_values(self):
        data = bytes(range(256))
        layout = select_layout(GroupType.BYTE)
        actual = self.dump(data, grouping=GroupType.BYTE)
        self.assertEqual(len(actual), 16)
        recovered = b"".join(layout.parse(line)[1] for line in actual)
        self.assertEqual(recovered, data)


class TestCompaction(unittest.TestCase):
    def dump(self, data: bytes, **kwargs):
        return hexdump(io.BytesIO(data), Configuration(compact=True, **kwargs))

    def test_run_followed_by_other_line(self):
        same = b"\xaa" * 16
        other = b"Z" * 16
        actual = self.dump(same * 48 + other)
        assert actual == [
            LONG.render(0, same),
            REDUNDANT_MARKER,
            LONG.render(47 * 16, same),
            LONG.render(48 * 16, other),
        ]

    def test_run_until_end_of_stream(self):
        same = bytes(16)
        actual = self.dump(same * 3)
        assert actual == [LONG.render(0, same), REDUNDANT_MARKER, LONG.render(0x20, same)]

    def test_single_duplicate(self):
        same = bytes(16)
        actual = self.dump(same * 2)
        assert actual == [LONG.render(0, same), REDUNDANT_MARKER, LONG.render(0x10, same)]

    def test_one_marker_per_run(self):
        a = b"a" * 16
        b = b"b" * 16
        actual = self.dump(a * 3 + b * 3)
        assert actual == [
            LONG.render(0x00, a),
            REDUNDANT_MARKER,
            LONG.render(0x20, a),
            LONG.render(0x30, b),
            REDUNDANT_MARKER,
            LONG.render(0x50, b),
        ]
        self.assertEqual(actual.count(REDUNDANT_MARKER), 2)

    def test_compaction_off(self):
        same = bytes(16)
        actual = hexdump(io.BytesIO(same * 3), Configuration())
        assert actual == [LONG.render(a, same) for a in (0, 0x10, 0x20)]

    def test_partial_line_is_not_redundant(self):
        same = bytes(16)
        actual = self.dump(same + same[:8])
        assert actual == [LONG.render(0, same), LONG.render(0x10, same[:8])]

    def test_first_line_at_start_is_shown(self):
        same = bytes(16)
        actual = self.dump(same * 4, start_address=0x10)
        assert actual == [LONG.render(0x10, same), REDUNDANT_MARKER, LONG.render(0x30, same)]

    def test_run_reaching_end_address(self):
        same = bytes(16)
        actual = self.dump(same * 5, end_address=0x3F)
        assert actual == [LONG.render(0, same), REDUNDANT_MARKER, LONG.render(0x30, same)]

    def test_run_then_partial_line(self):
        same = b"\x01" * 16
        actual = self.dump(same * 3 + b"tail")
        assert actual == [
            LONG.render(0x00, same),
            REDUNDANT_MARKER,
            LONG.render(0x20, same),
            LONG.render(0x30, b"tail"),
        ]

    def test_dump_to_sink(self):
        same = bytes(16)
        out = io.StringIO()
        count = Dumper(Configuration(compact=True)).dump(io.BytesIO(same * 3), out)
        self.assertEqual(count, 3)
        self.assertEqual(out.getvalue().count("\n"), 3)
        self.assertIn(REDUNDANT_MARKER, out.getvalue())


if __name__ == "__main__":
    unittest.main()
