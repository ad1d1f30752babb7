import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Optional, Sequence, Tuple, Union

from models.record import Record, RecordDetail
from utils.csv_utils import parse_csv_text
from utils.debounce import Debouncer
from utils.fetcher import RetrievalError, fetch_csv_text
from utils.search_utils import (
    EMPTY_QUERY,
    FilterResult,
    MatchMode,
    filter_records,
    is_empty_query,
    normalize_query,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_RETRIEVAL_FAILED = "retrieval_failed"
STATUS_SCHEMA_FAILED = "schema_failed"

MSG_LOADING = "Loading dictionary data..."
MSG_PROMPT = "Start typing to search."
MSG_NO_MATCH = "No entries found matching your search. Try a different term."
NO_DEFINITION = "No translation available."

Fetcher = Callable[..., Awaitable[str]]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session; replaced wholesale on every change."""
    status: str = STATUS_IDLE
    message: str = ""
    dataset: Tuple[Record, ...] = ()
    headers: Tuple[str, ...] = ()
    query: str = ""
    results: Tuple[Record, ...] = ()
    dropped_rows: int = 0
    loaded_at: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == STATUS_READY


def result_message(result: FilterResult) -> str:
    if is_empty_query(result):
        return MSG_PROMPT
    if not result:
        return MSG_NO_MATCH
    return f"{len(result)} entr{'y' if len(result) == 1 else 'ies'} found."


class LookupSession:
    """Owns the dataset and the active search for one running application.

    Retrieval is the only suspension point; parsing and filtering are synchronous.
    """

    def __init__(
        self,
        source_url: str,
        required_key: str = "fromContent",
        required_headers: Optional[Iterable[str]] = None,
        search_fields: Optional[Iterable[str]] = None,
        match_mode: Union[MatchMode, str] = MatchMode.CONTAINS,
        debounce_ms: int = 300,
        fetch_timeout: float = 20.0,
        secondary_key: str = "toContent",
        example_key: str = "types",
        fetcher: Optional[Fetcher] = None,
    ):
        self.source_url = source_url
        self.required_key = required_key
        self.required_headers = tuple(required_headers or (required_key,))
        self.search_fields = tuple(search_fields or (required_key,))
        self.match_mode = MatchMode.parse(match_mode, default=MatchMode.CONTAINS)
        self.fetch_timeout = fetch_timeout
        self.secondary_key = secondary_key
        self.example_key = example_key
        self._fetcher = fetcher or fetch_csv_text
        self._state = SessionState()
        self._inflight: Optional[asyncio.Future] = None
        self._debouncer = Debouncer(self.search, delay_ms=debounce_ms)

    @classmethod
    def from_settings(cls, s, fetcher: Optional[Fetcher] = None) -> "LookupSession":
        return cls(
            source_url=s.SHEET_CSV_URL,
            required_key=s.REQUIRED_KEY,
            required_headers=s.REQUIRED_HEADERS,
            search_fields=s.SEARCH_FIELDS,
            match_mode=s.MATCH_MODE,
            debounce_ms=s.DEBOUNCE_MS,
            fetch_timeout=s.FETCH_TIMEOUT_SECONDS,
            secondary_key=s.SECONDARY_KEY,
            example_key=s.EXAMPLE_KEY,
            fetcher=fetcher,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def debounce_ms(self) -> int:
        return self._debouncer.delay_ms

    def _replace(self, **changes) -> SessionState:
        self._state = dataclasses.replace(self._state, **changes)
        return self._state

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> SessionState:
        """Fetch and parse the sheet. Callers arriving mid-fetch share the same load."""
        if self._inflight is not None and not self._inflight.done():
            return await asyncio.shield(self._inflight)
        self._inflight = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._inflight)

    async def reload(self) -> SessionState:
        return await self.load()

    async def _load(self) -> SessionState:
        self._replace(status=STATUS_LOADING, message=MSG_LOADING)
        logger.info(f"Loading dictionary data from {self.source_url}")

        try:
            csv_text = await self._fetcher(self.source_url, timeout=self.fetch_timeout)
        except RetrievalError as e:
            logger.error(f"Data load failed: {e}")
            return self._retrieval_failed(e)
        except Exception as e:
            logger.exception(f"Unexpected error while loading data: {e}")
            return self._retrieval_failed(e)

        result = parse_csv_text(csv_text, self.required_key, self.required_headers)
        if not result.schema_ok:
            return self._replace(
                status=STATUS_SCHEMA_FAILED,
                message=(
                    "Failed to parse dictionary entries. Verify your sheet has "
                    f"{', '.join(repr(h) for h in result.missing_headers)} headers."
                ),
                dataset=(),
                headers=result.headers,
                query="",
                results=(),
                dropped_rows=0,
            )

        count = len(result.records)
        logger.info(
            f"Loaded {count} entries from {max(0, result.line_count - 1)} data lines "
            f"({result.dropped_rows} malformed, "
            f"{result.skipped_rows} without {self.required_key})"
        )
        return self._replace(
            status=STATUS_READY,
            message=f"Successfully loaded {count} entries. {MSG_PROMPT}",
            dataset=result.records,
            headers=result.headers,
            query="",
            results=(),
            dropped_rows=result.dropped_rows,
            loaded_at=_now_iso(),
        )

    def _retrieval_failed(self, error: Exception) -> SessionState:
        return self._replace(
            status=STATUS_RETRIEVAL_FAILED,
            message=(
                "Failed to load data. Ensure your Google Sheet is published "
                f"to the web as CSV. {error}"
            ),
            dataset=(),
            headers=(),
            query="",
            results=(),
            dropped_rows=0,
        )

    # ------------------------------------------------------------------
    # Presentation-facing operations
    # ------------------------------------------------------------------

    def get_dataset(self) -> Tuple[Record, ...]:
        return self._state.dataset

    def search(
        self,
        query: Optional[str],
        fields: Optional[Sequence[str]] = None,
        mode: Union[MatchMode, str, None] = None,
    ) -> FilterResult:
        """Filter the current dataset immediately and record it as the active result."""
        result = filter_records(
            self._state.dataset,
            query,
            fields or self.search_fields,
            MatchMode.parse(mode, default=self.match_mode),
        )
        if result is EMPTY_QUERY:
            self._replace(query="", results=())
        else:
            self._replace(query=normalize_query(query), results=tuple(result))
        return result

    def on_query_change(self, query: Optional[str]) -> asyncio.Future:
        """Debounced search: only the last query of a burst is evaluated."""
        return self._debouncer.trigger(query)

    def get_record(self, record_id: int) -> Optional[Record]:
        for record in self._state.dataset:
            if record.id == record_id:
                return record
        return None

    def describe(self, record: Record) -> RecordDetail:
        example = record.get(self.example_key) or None
        return RecordDetail(
            id=record.id,
            title=record.get(self.required_key, "") or "",
            definition=record.get(self.secondary_key) or NO_DEFINITION,
            example=example,
            record=record.to_dict(),
        )

    def close(self) -> None:
        self._debouncer.cancel()
