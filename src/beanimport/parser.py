import csv
import io
from pathlib import Path

from beanimport.errors import DecodeError
from beanimport.logging_setup import get_logger

log = get_logger("beanimport.parser")


def read_records(file_path: Path, header_lines: int, encoding: str = "utf-8-sig") -> list[list[str]]:
    """Read a platform export, skipping its preamble and column header row.

    The first record after the skipped lines names the columns and fixes the
    field count; rows with a different count (summary trailers, broken lines)
    are dropped.
    """
    try:
        with open(file_path, encoding=encoding, newline="") as f:
            contents = f.read()
    except (UnicodeDecodeError, LookupError) as exc:
        raise DecodeError(f"Can't decode {file_path} as {encoding}: {exc}; try --encoding gbk") from exc

    # records end at \n only; fields may hold U+2028 and other line separators
    lines = [line.removesuffix("\r") for line in contents.split("\n")]
    body = "\n".join(lines[header_lines:])
    reader = csv.reader(io.StringIO(body))

    width = None
    rows: list[list[str]] = []
    while True:
        try:
            line = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            log.debug("Dropping unparsable line %d of %s: %s", reader.line_num, file_path, exc)
            continue
        if not line:
            continue
        fields = [cell.strip() for cell in line]
        if width is None:
            width = len(fields)
            continue
        if len(fields) != width:
            log.debug("Dropping line %d of %s: expected %d fields, got %d", reader.line_num, file_path, width, len(fields))
            continue
        rows.append(fields)
    return rows
