"""Navigation routes — read and change the current app section."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from vertexpath.navigation import SECTIONS

from .dependencies import get_current_user_id, get_registry

router = APIRouter(prefix="/navigation")


class NavigateRequest(BaseModel):
    section: str


@router.get("")
def current_section(request: Request):
    user_router = get_registry(request).router_for(get_current_user_id(request))
    return {"current": user_router.current, "sections": list(SECTIONS)}


@router.post("")
def navigate(body: NavigateRequest, request: Request):
    user_router = get_registry(request).router_for(get_current_user_id(request))
    try:
        event = user_router.navigate(body.section)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"previous": event.previous, "current": event.current, "sections": list(SECTIONS)}
