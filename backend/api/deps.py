from fastapi import HTTPException, Request, WebSocket

from utils.session import LookupSession


def get_session(request: Request) -> LookupSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Lookup session is not initialized")
    return session


def get_ws_session(websocket: WebSocket) -> LookupSession:
    return websocket.app.state.session
