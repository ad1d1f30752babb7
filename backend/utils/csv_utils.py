import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from models.record import Record
from utils.header_utils import normalize_headers

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# A comma is a delimiter only when an even number of quotes follow it on the line,
# i.e. it is not inside a quoted field. Doubled quotes ("") are not unescaped.
CSV_SPLIT_RE = re.compile(r',(?=(?:(?:[^"]*"){2})*[^"]*$)')


class SchemaError(Exception):
    """Raised when required header keys are missing after normalization."""


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one parse pass over a CSV document."""
    records: Tuple[Record, ...] = ()
    headers: Tuple[str, ...] = ()
    raw_headers: Tuple[str, ...] = ()
    missing_headers: Tuple[str, ...] = ()
    dropped_rows: int = 0
    skipped_rows: int = 0
    line_count: int = 0

    @property
    def schema_ok(self) -> bool:
        return not self.missing_headers


def _clean_field(value: str) -> str:
    """Trim a field and strip one layer of surrounding double quotes."""
    text = value.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text.strip()


def split_csv_line(line: str) -> List[str]:
    """Split one CSV line on commas that are not enclosed in quotes.

    Fields are returned raw (quotes and whitespace untouched).
    """
    return CSV_SPLIT_RE.split(line)


def split_header_line(line: str) -> List[str]:
    """Split the header line on every comma, dropping quotes and surrounding whitespace."""
    return [h.replace('"', "").strip() for h in line.split(",")]


def parse_csv_text(
    csv_text: Optional[str],
    required_key: str,
    required_headers: Optional[Iterable[str]] = None,
) -> ParseResult:
    """Parse CSV text into records keyed by normalized headers.

    Steps:
    1. Trim the input and split into lines (first line is the header row)
    2. Normalize the headers; bail out with `missing_headers` set when a required key is absent
    3. Split each data line on unquoted commas; drop rows whose arity differs from the header
    4. Keep rows whose `required_key` value is non-empty, with `id` = line index

    Never raises for malformed rows; see `require_schema` for a strict variant.
    """
    required = [required_key] + [h for h in (required_headers or []) if h != required_key]

    text = (csv_text or "").strip()
    if not text:
        return ParseResult(missing_headers=tuple(required))

    lines = text.split("\n")
    raw_headers = split_header_line(lines[0])
    headers = normalize_headers(raw_headers)

    missing = tuple(k for k in required if k not in headers)
    if missing:
        logger.error(
            f"Required columns {list(missing)} not found after normalization. "
            f"Normalized headers: {headers}"
        )
        return ParseResult(
            headers=tuple(headers),
            raw_headers=tuple(raw_headers),
            missing_headers=missing,
            line_count=len(lines),
        )

    records: List[Record] = []
    dropped = 0
    skipped = 0
    for i in range(1, len(lines)):
        values = split_csv_line(lines[i])
        if len(values) != len(headers):
            dropped += 1
            logger.debug(f"Dropping line {i}: expected {len(headers)} fields, got {len(values)}")
            continue

        entry: Dict[str, str] = {}
        for key, value in zip(headers, values):
            entry[key] = _clean_field(value)

        if not entry.get(required_key):
            skipped += 1
            continue
        records.append(Record(id=i, values=entry))

    if dropped:
        logger.warning(f"Dropped {dropped} row(s) with mismatched column count")

    return ParseResult(
        records=tuple(records),
        headers=tuple(headers),
        raw_headers=tuple(raw_headers),
        dropped_rows=dropped,
        skipped_rows=skipped,
        line_count=len(lines),
    )


def parse_csv(csv_text: Optional[str], required_key: str) -> List[Record]:
    """Parse CSV text and return only the records (empty on schema failure)."""
    return list(parse_csv_text(csv_text, required_key).records)


def require_schema(result: ParseResult) -> ParseResult:
    """Return `result` unchanged, or raise SchemaError when required headers were missing."""
    if not result.schema_ok:
        raise SchemaError(f"missing required columns: {', '.join(result.missing_headers)}")
    return result


def read_csv_file(file_path: Union[str, Path]) -> str:
    """Read a local CSV export as text (a UTF-8 BOM is dropped)."""
    with open(file_path, "r", encoding="utf-8-sig") as f:
        return f.read()


def records_to_dicts(records: Iterable[Record]) -> List[Dict[str, Any]]:
    return [r.to_dict() for r in records]
