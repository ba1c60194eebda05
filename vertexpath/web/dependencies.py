"""Shared FastAPI dependencies — caller identity and editing sessions."""

from fastapi import HTTPException, Request

from .sessions import SessionRegistry, UserSession


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_current_user_id(request: Request) -> str:
    """Return the caller's user id from the identity provider's header, or 401."""
    header = request.app.state.config.web.user_header
    user_id = (request.headers.get(header) or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail=f"Missing {header} header")
    return user_id


def require_session(request: Request) -> UserSession:
    user_id = get_current_user_id(request)
    session = get_registry(request).get(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="No profile editing session; POST /profile/session first")
    return session
