import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from models.record import Record

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class MatchMode(str, Enum):
    CONTAINS = "contains"
    EXACT = "exact"  # whole-value equality, case-insensitive

    @classmethod
    def parse(cls, value: Union[str, "MatchMode", None], default: Optional["MatchMode"] = None) -> "MatchMode":
        if isinstance(value, MatchMode):
            return value
        text = (value or "").strip().lower()
        for mode in cls:
            if mode.value == text:
                return mode
        if default is not None:
            return default
        raise ValueError(f"unknown match mode: {value!r}")


class _EmptyQuery:
    """Signal returned for a blank query: clear the results, do not show everything."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EMPTY_QUERY"


EMPTY_QUERY = _EmptyQuery()

FilterResult = Union[List[Record], _EmptyQuery]


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def is_empty_query(result: object) -> bool:
    return result is EMPTY_QUERY


def record_matches(record: Record, query: str, fields: Iterable[str], mode: MatchMode) -> bool:
    """True if any of `fields` (present and non-empty) matches the normalized query."""
    for name in fields:
        value = record.get(name)
        if not value:
            continue
        value = value.lower()
        if mode is MatchMode.EXACT:
            if value == query:
                return True
        elif query in value:
            return True
    return False


def filter_records(
    dataset: Sequence[Record],
    query: Optional[str],
    fields: Iterable[str],
    mode: Union[MatchMode, str] = MatchMode.CONTAINS,
) -> FilterResult:
    """Return the records matching `query`, in dataset order.

    A blank query yields EMPTY_QUERY rather than the full dataset.
    """
    q = normalize_query(query)
    if not q:
        return EMPTY_QUERY

    match_mode = MatchMode.parse(mode)
    field_list = list(fields)
    return [r for r in dataset if record_matches(r, q, field_list, match_mode)]
