"""
dump the contents of files (or the standard input) in hex and ascii

addresses for -s and -e may be given in octal (0 prefix), decimal or hex
(0x prefix), for example 200 = 0310 = 0xc8
"""
import argparse
import os
import sys
from typing import List, Optional, TextIO

from hx.dumpengine.config import Configuration, read_positive_long
from hx.dumpengine.dump import Dumper, SeekError
from hx.dumpengine.layout import GroupType
from hx.dumpengine.report import Reporter

VERSION = "1.0.0"


def address(text: str) -> int:
    try:
        return read_positive_long(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="hx",
        description="Dumps the contents of a file in hex and ASCII. "
        "If no filenames are supplied, hx reads from the standard input stream.",
    )
    parser.set_defaults(grouping=GroupType.LONG)
    parser.add_argument(
        "-b",
        dest="grouping",
        action="store_const",
        const=GroupType.BYTE,
        help="display output grouped by bytes",
    )
    parser.add_argument(
        "-w",
        dest="grouping",
        action="store_const",
        const=GroupType.WORD,
        help="display output grouped by words (16-bits)",
    )
    parser.add_argument(
        "-l",
        dest="grouping",
        action="store_const",
        const=GroupType.LONG,
        help="display output grouped by longwords (32-bits), the default",
    )
    parser.add_argument(
        "-q",
        dest="grouping",
        action="store_const",
        const=GroupType.QUAD,
        help="display output grouped by quadwords (64-bits)",
    )
    parser.add_argument(
        "-o",
        dest="grouping",
        action="store_const",
        const=GroupType.OCT,
        help="display output grouped by octwords (128-bits)",
    )
    parser.add_argument(
        "-c",
        "--compact",
        action="store_true",
        default=False,
        help='compact duplicate lines, blocks of identical data are shown as the first line followed by a single line of "===="',
    )
    parser.add_argument(
        "-s", "--start", type=address, default=None, help="start the dump at the given location"
    )
    parser.add_argument(
        "-e", "--end", type=address, default=None, help="end the dump at the given location"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="verbose output"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--progress", action="store_true", default=False, help="show progress"
    )
    parser.add_argument(
        "files", type=str, nargs="*", default=[], help="files to dump"
    )
    return parser.parse_args(argv)


def dump_file(
    path: str, dumper: Dumper, reporter: Reporter, out: TextIO, banner: bool = False
) -> bool:
    try:
        f = open(path, "rb")
    except OSError:
        reporter.error(f'Couldn\'t open "{path}".')
        return False

    with f:
        if banner:
            out.write(f"\n{path}:\n")
        reporter.file_info(path)
        total = os.fstat(f.fileno()).st_size
        start = dumper.configuration.start_address
        if start:
            total = max(0, total - start)
        with reporter.progress(f, total) as fobj:
            try:
                dumper.dump(fobj, out)
            except SeekError:
                reporter.error("seek to start position failed.")
                return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    out = sys.stdout
    reporter = Reporter(verbose=args.verbose, show_progress=args.progress)
    dumper = Dumper(Configuration.from_args(args))

    if not args.files:
        try:
            dumper.dump(sys.stdin.buffer, out)
        except SeekError:
            reporter.error("seek to start position failed.")
            return 1
        return 0

    ok = True
    for path in args.files:
        if not dump_file(path, dumper, reporter, out, banner=len(args.files) > 1):
            ok = False
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
