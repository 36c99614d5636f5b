"""
Input line source and output sink

Files are named by path; "-" stands for stdin (input) or stdout (output).
Several input files are read as one concatenated stream of lines.

Text is decoded as UTF-8 with surrogateescape, so bytes that are not
valid UTF-8 (e.g. Latin-1 comments in older style files) pass through a
conversion unchanged.
"""

import os
import sys
from pathlib import Path
from typing import Iterator, List, Mapping, Sequence, TextIO

from .log import LOG


STDIO = "-"

ENCODING = "utf-8"
ERRORS = "surrogateescape"


class SourceError(Exception):
    """Raised when an input or output file cannot be used"""
    pass


def stream_prepare(stream: TextIO) -> TextIO:
    """Switch a standard stream to surrogateescape, where supported"""
    if hasattr(stream, "reconfigure"):
        stream.reconfigure(errors=ERRORS)
    return stream


def lines_read(paths: Sequence[str]) -> Iterator[str]:
    """
    Yield the lines of all input files, in order

    Lines keep their terminators. An empty path list reads stdin.

    Raises:
        SourceError: If a file cannot be opened or read
    """
    for path in paths or [STDIO]:
        if path == STDIO:
            LOG("Reading from stdin", level=2)
            yield from stream_prepare(sys.stdin)
            continue

        try:
            with open(path, "r", encoding=ENCODING, errors=ERRORS) as f:
                LOG(f"Reading {path}", level=2)
                yield from f
        except OSError as e:
            raise SourceError(f"Can't open input file '{path}': {e.strerror}")


def lines_collect(paths: Sequence[str]) -> List[str]:
    """Read all input lines into memory"""
    return list(lines_read(paths))


def outputPath_check(path: str, overwrite: bool) -> None:
    """
    Refuse to clobber an existing output file unless allowed

    Raises:
        SourceError: If the path is a directory, or the file exists and
                     overwrite is False
    """
    if path == STDIO:
        return
    target = Path(path)
    if target.is_dir():
        raise SourceError(f"Output file '{path}' is a directory")
    if target.exists() and not overwrite:
        raise SourceError(
            f"Output file '{path}' already exists (use -O to overwrite it)"
        )


def text_write(path: str, text: str) -> None:
    """
    Write the final text to a file or stdout

    Raises:
        SourceError: If the file cannot be written
    """
    texts_write({path: text})


def texts_write(outputs: Mapping[str, str]) -> None:
    """
    Write several output files all together or not at all

    Each file is first written to a temporary file beside it. Only when all
    of them are written are they moved into place. If moving one fails,
    the files already moved are removed again.

    Args:
        outputs: Text by output path ("-" for stdout, written last)

    Raises:
        SourceError: If any file cannot be written
    """
    pending = {path: Path(path) for path in outputs if path != STDIO}
    temporaries = {
        path: target.with_name(f".{target.name}.tmp") for path, target in pending.items()
    }

    try:
        for path, temporary in temporaries.items():
            try:
                temporary.write_text(outputs[path], encoding=ENCODING, errors=ERRORS)
            except OSError as e:
                raise SourceError(f"Can't write output file '{path}': {e.strerror}")

        moved: List[Path] = []
        for path, temporary in temporaries.items():
            try:
                os.replace(temporary, pending[path])
            except OSError as e:
                for target in moved:
                    target.unlink(missing_ok=True)
                raise SourceError(f"Can't write output file '{path}': {e.strerror}")
            moved.append(pending[path])
    finally:
        for temporary in temporaries.values():
            temporary.unlink(missing_ok=True)

    for path in pending:
        LOG(f"Wrote {path}", level=1)

    if STDIO in outputs:
        stdout = stream_prepare(sys.stdout)
        stdout.write(outputs[STDIO])
        stdout.flush()
