from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from typing import Optional
from time import perf_counter
import asyncio
import logging

from api.deps import get_session, get_ws_session
from models.record import SearchResponse
from utils.csv_utils import records_to_dicts
from utils.debounce import Debouncer
from utils.search_utils import FilterResult, MatchMode, filter_records, is_empty_query, normalize_query
from utils.session import LookupSession, result_message

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/api/search",
    tags=["search"]
)


def _search_payload(session: LookupSession, query: str, result: FilterResult, took_ms: Optional[int] = None) -> dict:
    if is_empty_query(result):
        return {
            "success": False,
            "message": result_message(result),
            "query": "",
            "empty_query": True,
            "headers": list(session.state.headers),
            "data": [],
            "count": 0,
            "took_ms": took_ms,
        }
    return {
        "success": True,
        "message": result_message(result),
        "query": query,
        "empty_query": False,
        "headers": list(session.state.headers),
        "data": records_to_dicts(result),
        "count": len(result),
        "took_ms": took_ms,
    }


@router.get("/", response_model=SearchResponse)
async def search_entries(
    query: Optional[str] = Query(None, description="Search term (trimmed, case-insensitive)"),
    field: Optional[str] = Query(
        None,
        description="Restrict matching to one normalized column key (e.g., fromContent)"
    ),
    mode: Optional[str] = Query(
        None,
        description="Match mode: 'contains' (substring) or 'exact' (whole value)"
    ),
    session: LookupSession = Depends(get_session),
):
    """
    Search the loaded dictionary.

    Args:
        query: Search term. A blank query returns empty_query=true and no rows.
        field: Optional column key to limit the search to
        mode: Optional match mode override

    Returns:
        Dictionary with search results in dataset order
    """
    logger.info(f"Search request - query: {query}, field: {field}, mode: {mode}")

    state = session.state
    if not state.is_ready:
        raise HTTPException(status_code=503, detail=state.message or "Dictionary data is not loaded")

    match_mode = None
    if mode:
        try:
            match_mode = MatchMode.parse(mode)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    t0 = perf_counter()
    result = session.search(query, fields=[field] if field else None, mode=match_mode)
    took_ms = int((perf_counter() - t0) * 1000)
    return _search_payload(session, session.state.query, result, took_ms)


@router.websocket("/ws")
async def search_stream(websocket: WebSocket):
    """Keystroke-level search: each text frame is a query; one reply per quiet period.

    Every connection debounces on its own and replies with the query it captured,
    so concurrent clients never see each other's results.
    """
    session = get_ws_session(websocket)
    await websocket.accept()

    def _evaluate(text: Optional[str]):
        result = filter_records(session.get_dataset(), text, session.search_fields, session.match_mode)
        return normalize_query(text), result

    debouncer = Debouncer(_evaluate, delay_ms=session.debounce_ms)
    latest: dict = {"future": None}
    pending: set = set()

    async def _deliver(future: asyncio.Future) -> None:
        try:
            query, result = await future
        except asyncio.CancelledError:
            return
        except Exception as e:
            logger.error(f"Debounced search failed: {e}")
            return
        # Superseded keystrokes share the same result; only the newest replies
        if future is not latest["future"]:
            return
        await websocket.send_json(_search_payload(session, query, result))

    try:
        while True:
            text = await websocket.receive_text()
            if not session.state.is_ready:
                await websocket.send_json({
                    "success": False,
                    "message": session.state.message,
                    "status": session.state.status,
                })
                continue
            future = debouncer.trigger(text)
            latest["future"] = future
            task = asyncio.create_task(_deliver(future))
            pending.add(task)
            task.add_done_callback(pending.discard)
    except WebSocketDisconnect:
        logger.info("Search websocket disconnected")
    finally:
        debouncer.cancel()
        for task in list(pending):
            task.cancel()
