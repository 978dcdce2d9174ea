"""
the dump engine

reads a stream in chunks of 16 bytes, applies the start/end window,
compacts runs of identical lines and renders the rest through a Layout
"""
from typing import IO, Iterator, List, Optional, TextIO

from hx.dumpengine.config import Configuration
from hx.dumpengine.layout import BYTES_PER_LINE, Layout, select_layout

REDUNDANT_MARKER = "====\n"


class SeekError(RuntimeError):
    """ the stream could not be positioned at the start address """


class Chunk(object):
    """ up to 16 bytes read at a known address """

    def __init__(self, address: int, data: bytes):
        self._address = address
        self._data = data
        self._length = len(data)

    def __len__(self):
        return self._length

    def __repr__(self):
        return "[{0:x}] {1} bytes".format(self._address, self._length)

    @property
    def address(self) -> int:
        return self._address

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def length(self) -> int:
        return self._length

    @property
    def is_full(self) -> bool:
        return self._length == BYTES_PER_LINE

    def truncate(self, end_address: int):
        """ clip the length so the chunk stops at the (inclusive) end address """
        if end_address < self._address + BYTES_PER_LINE:
            self._length = max(0, min(self._length, end_address - self._address + 1))


def read_chunk(stream: IO[bytes], address: int) -> Chunk:
    """ read up to 16 bytes, a short read only happens at the end of the stream """
    data = b""
    while len(data) < BYTES_PER_LINE:
        block = stream.read(BYTES_PER_LINE - len(data))
        if not block:
            break
        data += block
    return Chunk(address, data)


class Dumper(object):
    def __init__(self, configuration: Configuration):
        self._configuration = configuration
        self._layout = select_layout(configuration.grouping)

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def layout(self) -> Layout:
        return self._layout

    def _seek(self, stream: IO[bytes], address: int):
        try:
            stream.seek(address)
        except (OSError, ValueError) as e:
            raise SeekError(f"seek to start position {address:#x} failed") from e

    def lines(self, stream: IO[bytes]) -> Iterator[str]:
        """
        yield the dump lines of a stream

        a SeekError is raised before the first line when the start address
        cannot be reached
        """
        config = self._configuration
        if config.is_empty_range:
            return

        start = config.start_address
        end = config.end_address
        if start is not None:
            self._seek(stream, start)
        first = start if start is not None else 0

        address = first
        redundant = False
        previous: Optional[bytes] = None

        while True:
            chunk = read_chunk(stream, address)

            if end is not None:
                if end <= address and not redundant:
                    break
                chunk.truncate(end)

            if (
                config.compact
                and address != first
                and chunk.is_full
                and chunk.data == previous
            ):
                # one marker per run of identical lines
                if not redundant:
                    yield REDUNDANT_MARKER
                    redundant = True
                address += len(chunk)
                continue

            if redundant:
                # a run always ends with its last line, also at the end of the stream
                yield self._layout.render(address - BYTES_PER_LINE, previous)
                redundant = False

            if not len(chunk):
                break

            yield self._layout.render(address, chunk.data, chunk.length)
            if chunk.is_full:
                previous = chunk.data
            address += len(chunk)

    def dump(self, stream: IO[bytes], out: TextIO) -> int:
        """ write the dump of a stream to out, returns the number of lines """
        count = 0
        for line in self.lines(stream):
            out.write(line)
            count += 1
        return count


def hexdump(stream: IO[bytes], configuration: Configuration) -> List[str]:
    """
    return the dump of a stream as a list of lines

    00000000 00000000 00000000 00000000  # 00000000  ................
    """
    return list(Dumper(configuration).lines(stream))
