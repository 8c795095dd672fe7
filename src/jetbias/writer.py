"""Tab-separated table writer for per-event records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence, TextIO

from .record import record_values

logger = logging.getLogger(__name__)

DELIMITER = "\t"


def format_value(value: float) -> str:
    """Shortest round-trip text form of a float (`nan` for unset values)."""
    return repr(float(value))


class TableWriter:
    """Scoped owner of one output sink.

    A sink that cannot be opened, or that fails while writing or closing, is
    reported as a warning and dropped. Every later write is then a no-op, so
    the caller can keep processing events.
    """

    def __init__(self) -> None:
        self._file: TextIO | None = None
        self._path: Path | None = None
        self._fields: tuple[str, ...] | None = None
        self._rows_written = 0
        self._error: OSError | None = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def header_written(self) -> bool:
        return self._fields is not None

    @property
    def rows_written(self) -> int:
        return self._rows_written

    @property
    def error(self) -> OSError | None:
        """The I/O error that made the sink unusable, if any."""
        return self._error

    def open(self, path: str | Path) -> bool:
        """Open (truncate) `path` for writing; return False if unavailable."""
        if self._file is not None:
            raise RuntimeError(f"Writer already open on {self._path}.")
        self._path = Path(path)
        self._fields = None
        self._rows_written = 0
        self._error = None
        try:
            self._file = self._path.open("w", encoding="utf-8", newline="\n")
        except OSError as exc:
            logger.warning("Could not open output file %s: %s", self._path, exc)
            self._file = None
            self._error = exc
            return False
        return True

    def write_header(self, fields: Sequence[str]) -> None:
        """Write the field-name row; must precede any data row."""
        if self._fields is not None:
            raise RuntimeError("Table header has already been written.")
        self._fields = tuple(fields)
        self._write_line(DELIMITER.join(self._fields))

    def write_row(self, record: Mapping[str, float]) -> None:
        """Write one record's values in header order."""
        if self._fields is None:
            raise RuntimeError("write_header must be called before write_row.")
        if self._file is None:
            return
        values = record_values(record, self._fields)
        if self._write_line(DELIMITER.join(format_value(v) for v in values)):
            self._rows_written += 1

    def close(self) -> None:
        """Release the sink; safe to call repeatedly or when never opened."""
        if self._file is None:
            return
        handle, self._file = self._file, None
        try:
            handle.close()
        except OSError as exc:
            self._report_failure(exc)

    def _write_line(self, line: str) -> bool:
        if self._file is None:
            return False
        try:
            self._file.write(line + "\n")
        except OSError as exc:
            self._abandon(exc)
            return False
        return True

    def _abandon(self, exc: OSError) -> None:
        """Drop a sink that failed mid-run; later writes become no-ops."""
        handle, self._file = self._file, None
        self._report_failure(exc)
        if handle is None:
            return
        try:
            handle.close()
        except OSError as close_exc:
            logger.debug("Ignoring close error on broken sink %s: %s", self._path, close_exc)

    def _report_failure(self, exc: OSError) -> None:
        self._error = exc
        logger.warning("Output file %s became unusable, output is incomplete: %s", self._path, exc)

    def __enter__(self) -> "TableWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
