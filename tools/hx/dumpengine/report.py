import contextlib
import os
import sys
from typing import IO, Iterator, Optional, TextIO

import arrow
from tqdm import tqdm
from tqdm.utils import CallbackIOWrapper

PROGRAM = "hx"


class Reporter(object):
    """
    status and error messages on stderr

    - errors are always shown
    - status messages only when verbose
    - progress bars only when requested and the size of the input is known
    """

    def __init__(
        self,
        verbose: bool = False,
        show_progress: bool = False,
        stream: Optional[TextIO] = None,
    ):
        self._verbose = verbose
        self._show_progress = show_progress
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        if self._stream is None:
            return sys.stderr
        return self._stream

    def error(self, message: str):
        print(f"{PROGRAM}:  {message}", file=self.stream)

    def info(self, message: str):
        if self._verbose:
            print(message, file=self.stream)

    def file_info(self, path: str):
        """ report size and modification time of a file about to be dumped """
        if not self._verbose:
            return
        stat = os.stat(path)
        modified = arrow.get(stat.st_mtime).format("YYYY-MM-DD HH:mm:ss")
        self.info(f"Dumping {path}: {stat.st_size} bytes, modified {modified}")

    @contextlib.contextmanager
    def progress(self, fobj: IO[bytes], total: Optional[int] = None) -> Iterator[IO[bytes]]:
        """ wrap fobj so that reads advance a progress bar """
        if not self._show_progress:
            yield fobj
            return
        with tqdm(
            total=total,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            file=self.stream,
            leave=False,
        ) as t:
            yield CallbackIOWrapper(t.update, fobj, "read")
