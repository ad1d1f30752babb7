from fastapi import APIRouter, Depends, HTTPException
import logging

from api.deps import get_session
from config import settings
from models.record import DatasetResponse, DatasetStatus, DisplayColumn, RecordDetail
from utils.csv_utils import records_to_dicts
from utils.session import (
    STATUS_RETRIEVAL_FAILED,
    STATUS_SCHEMA_FAILED,
    LookupSession,
    SessionState,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/api/dataset",
    tags=["dataset"]
)


def _status_payload(session: LookupSession, state: SessionState) -> dict:
    return {
        "status": state.status,
        "message": state.message,
        "count": len(state.dataset),
        "headers": list(state.headers),
        "dropped_rows": state.dropped_rows,
        "loaded_at": state.loaded_at,
        "source_url": session.source_url,
    }


@router.get("/", response_model=DatasetResponse)
async def get_dataset(session: LookupSession = Depends(get_session)):
    """Return the full parsed dataset with the display column vocabulary."""
    state = session.state
    return {
        **_status_payload(session, state),
        "columns": [DisplayColumn(**c) for c in settings.DISPLAY_COLUMNS],
        "data": records_to_dicts(session.get_dataset()),
    }


@router.get("/status", response_model=DatasetStatus)
async def get_status(session: LookupSession = Depends(get_session)):
    return _status_payload(session, session.state)


@router.post("/reload", response_model=DatasetStatus)
async def reload_dataset(session: LookupSession = Depends(get_session)):
    """Re-fetch and re-parse the sheet, replacing the dataset wholesale.

    Returns:
        The new status snapshot; 502 when the fetch failed, 422 when the
        sheet lacks the required columns.
    """
    logger.info("Dataset reload requested")
    state = await session.reload()
    if state.status == STATUS_RETRIEVAL_FAILED:
        raise HTTPException(status_code=502, detail=state.message)
    if state.status == STATUS_SCHEMA_FAILED:
        raise HTTPException(status_code=422, detail=state.message)
    return _status_payload(session, state)


@router.get("/{record_id}", response_model=RecordDetail)
async def get_record(record_id: int, session: LookupSession = Depends(get_session)):
    """Detail view for one entry (title, definition, optional example)."""
    record = session.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Entry {record_id} not found")
    return session.describe(record)
