from typing import Optional

from hx.dumpengine.layout import GroupType


def read_positive_long(text: str) -> int:
    """
    read a decimal, hexadecimal (0x prefix) or octal (0 prefix) number

    digits are consumed up to the first character that is not a digit of the
    base, the value read so far is returned

    :param text: the number as typed on the command line
    :return: the value
    """
    if not text or text[0] not in "0123456789":
        raise ValueError(f"invalid address {text!r}")

    base = 10
    pos = 0
    if text[0] == "0":
        if text[1:2].lower() == "x":
            base = 16
            pos = 2
        else:
            base = 8
            pos = 1

    value = 0
    for c in text[pos:]:
        if c not in "0123456789abcdefABCDEF":
            break
        digit = int(c, 16)
        if digit >= base:
            break
        value = value * base + digit
    return value


class Configuration(object):
    """ resolved settings for dumping a stream """

    grouping: GroupType
    compact: bool
    start_address: Optional[int]
    end_address: Optional[int]

    def __init__(
        self,
        grouping: int = GroupType.LONG,
        compact: bool = False,
        start_address: Optional[int] = None,
        end_address: Optional[int] = None,
    ):
        try:
            self.grouping = GroupType(grouping)
        except ValueError:
            raise ValueError(
                f"unsupported grouping {grouping}, must be one of 1, 2, 4, 8 or 16"
            ) from None
        if start_address is not None and start_address < 0:
            raise ValueError(f"start address {start_address} is negative")
        if end_address is not None and end_address < 0:
            raise ValueError(f"end address {end_address} is negative")
        self.compact = bool(compact)
        self.start_address = start_address
        self.end_address = end_address

    def __repr__(self):
        return "Configuration(grouping={0}, compact={1}, start={2}, end={3})".format(
            int(self.grouping), self.compact, self.start_address, self.end_address
        )

    @classmethod
    def from_args(cls, args) -> "Configuration":
        return cls(
            grouping=args.grouping,
            compact=args.compact,
            start_address=args.start,
            end_address=args.end,
        )

    @property
    def is_empty_range(self) -> bool:
        return (
            self.start_address is not None
            and self.end_address is not None
            and self.end_address <= self.start_address
        )
