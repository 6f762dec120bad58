"""CSV text to a list of header-keyed records."""

from __future__ import annotations

import csv


def split_csv_line(line: str) -> list[str]:
    """Split one line on commas, honouring double-quote quoting."""
    return next(csv.reader([line]), [])


def parse_csv_records(data: str | bytes) -> list[dict[str, str]]:
    """Build one record per non-blank line after the header.

    Cells are matched to header names by position. When a row and the header
    differ in length only the common prefix is kept: surplus cells are
    dropped and missing cells leave their keys out of the record.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    headers = split_csv_line(lines[0])
    return [
        dict(zip(headers, split_csv_line(line)))
        for line in lines[1:]
        if line.strip()
    ]
