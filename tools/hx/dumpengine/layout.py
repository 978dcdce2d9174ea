"""
fixed column layouts for hex dump lines

a layout is built from a template string where
- X marks a hex digit slot
- A marks the address field
- C marks the ascii field
everything else is copied verbatim into every rendered line
"""
import enum
from typing import Dict, Optional, Sequence, Tuple

BYTES_PER_LINE = 16
ADDRESS_WIDTH = 8
ADDRESS_MASK = 0xFFFFFFFF


class GroupType(enum.IntEnum):
    """ bytes per visual group of hex digits """

    BYTE = 1
    WORD = 2
    LONG = 4
    QUAD = 8
    OCT = 16


class Layout(object):
    """ read-only column template for one grouping """

    def __init__(
        self,
        group_size: int,
        template: str,
        hex_column_offsets: Sequence[int],
        address_field_offset: int,
        ascii_field_offset: int,
    ):
        self._group_size = group_size
        self._template = template
        self._hex_column_offsets = tuple(hex_column_offsets)
        self._address_field_offset = address_field_offset
        self._ascii_field_offset = ascii_field_offset
        self._blank = "".join(" " if c in "XAC" else c for c in template)

    def __repr__(self):
        return "Layout(group_size={0}, line_width={1})".format(
            self._group_size, self.line_width
        )

    @property
    def group_size(self) -> int:
        return self._group_size

    @property
    def bytes_per_line(self) -> int:
        return BYTES_PER_LINE

    @property
    def template(self) -> str:
        return self._template

    @property
    def hex_column_offsets(self) -> Tuple[int, ...]:
        return self._hex_column_offsets

    @property
    def address_field_offset(self) -> int:
        return self._address_field_offset

    @property
    def address_field_width(self) -> int:
        return ADDRESS_WIDTH

    @property
    def ascii_field_offset(self) -> int:
        return self._ascii_field_offset

    @property
    def line_width(self) -> int:
        """ width of a rendered line, including the trailing newline """
        return len(self._template)

    def render(self, address: int, data: bytes, length: Optional[int] = None) -> str:
        """
        produce one dump line

        :param address: address of the first byte, only the low 32 bits are shown
        :param data: the bytes of the line
        :param length: number of bytes of data to show, defaults to all (max 16)
        :return: the line, newline terminated
        """
        if length is None:
            length = len(data)
        length = min(length, len(data), BYTES_PER_LINE)

        line = list(self._blank)
        addr_part = "%08x" % (address & ADDRESS_MASK)
        pos = self._address_field_offset
        line[pos : pos + ADDRESS_WIDTH] = addr_part

        for i in range(0, length):
            value = data[i]
            pos = self._hex_column_offsets[i]
            line[pos : pos + 2] = "%02x" % value
            symbol = "."
            if 0x20 <= value <= 0x7E:
                symbol = chr(value)
            line[self._ascii_field_offset + i] = symbol

        return "".join(line)

    def parse(self, line: str) -> Tuple[int, bytes]:
        """
        read a rendered line back into (address, bytes)

        the hex field is read slot by slot, the first blank slot ends the data
        and every slot after it must be blank too

        :raises ValueError: the line is not in the format of this layout
        """
        if line.endswith("\n"):
            line = line[:-1]
        if len(line) != self.line_width - 1:
            raise ValueError(
                "line of width {0} does not match layout width {1}".format(
                    len(line), self.line_width - 1
                )
            )
        for pos, c in enumerate(self._template[:-1]):
            if c not in "XAC" and line[pos] != c:
                raise ValueError(f"unexpected {line[pos]!r} in column {pos}")

        pos = self._address_field_offset
        addr_part = line[pos : pos + ADDRESS_WIDTH]
        if not _is_hex(addr_part):
            raise ValueError(f"invalid address field {addr_part!r}")
        address = int(addr_part, 16)

        result = bytearray()
        blank = False
        for pos in self._hex_column_offsets:
            digits = line[pos : pos + 2]
            if digits == "  ":
                blank = True
                continue
            if blank or not _is_hex(digits):
                raise ValueError(f"invalid hex slot {digits!r} in column {pos}")
            result.append(int(digits, 16))
        return address, bytes(result)


def _is_hex(digits: str) -> bool:
    return all(c in "0123456789abcdef" for c in digits)


# the column tables are the historical ones and must not be derived
LAYOUT_TABLES = {
    GroupType.BYTE: (
        "XX XX XX XX  XX XX XX XX  XX XX XX XX  XX XX XX XX  # AAAAAAAA  CCCCCCCCCCCCCCCC\n",
        (0, 3, 6, 9, 13, 16, 19, 22, 26, 29, 32, 35, 39, 42, 45, 48),
        54,
        64,
    ),
    GroupType.WORD: (
        "XXXX XXXX  XXXX XXXX  XXXX XXXX  XXXX XXXX  # AAAAAAAA  CCCCCCCCCCCCCCCC\n",
        (0, 2, 5, 7, 11, 13, 16, 18, 22, 24, 27, 29, 33, 35, 38, 40),
        46,
        56,
    ),
    GroupType.LONG: (
        "XXXXXXXX XXXXXXXX XXXXXXXX XXXXXXXX  # AAAAAAAA  CCCCCCCCCCCCCCCC\n",
        (0, 2, 4, 6, 9, 11, 13, 15, 18, 20, 22, 24, 27, 29, 31, 33),
        39,
        49,
    ),
    GroupType.QUAD: (
        "XXXXXXXXXXXXXXXX XXXXXXXXXXXXXXXX  # AAAAAAAA  CCCCCCCCCCCCCCCC\n",
        (0, 2, 4, 6, 8, 10, 12, 14, 17, 19, 21, 23, 25, 27, 29, 31),
        37,
        47,
    ),
    GroupType.OCT: (
        "XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX  # AAAAAAAA  CCCCCCCCCCCCCCCC\n",
        (0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24, 26, 28, 30),
        36,
        46,
    ),
}

LAYOUTS: Dict[GroupType, Layout] = {
    grouping: Layout(int(grouping), *table) for grouping, table in LAYOUT_TABLES.items()
}


def select_layout(grouping: int) -> Layout:
    layout = LAYOUTS.get(grouping)
    if layout is None:
        raise ValueError(f"No layout for grouping of {grouping} bytes")
    return layout


def render_line(layout: Layout, address: int, data: bytes, length: Optional[int] = None) -> str:
    return layout.render(address, data, length)


def parse_line(layout: Layout, line: str) -> Tuple[int, bytes]:
    return layout.parse(line)
