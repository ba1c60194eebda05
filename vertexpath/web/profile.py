"""Profile editing routes — session, fields, skills, avatar, save."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import BaseModel

from vertexpath.navigation import AFTER_PROFILE_SAVE
from vertexpath.profile.errors import ProfileError, ValidationError

from .dependencies import get_current_user_id, get_registry, require_session
from .sessions import UserSession, profile_view

logger = logging.getLogger("vertexpath.web.profile")

router = APIRouter(prefix="/profile")


class SkillUpdate(BaseModel):
    action: Literal["add", "remove", "replace"]
    skill: str = ""


@router.post("/session")
async def start_session(request: Request):
    user_id = get_current_user_id(request)
    registry = get_registry(request)
    session = registry.start(user_id)
    try:
        await session.engine.load()
    except ProfileError:
        if registry.get(user_id) is session:
            registry.end(user_id)
        raise
    session.router.navigate("profile")
    return profile_view(session.engine)


@router.delete("/session")
def end_session(request: Request):
    user_id = get_current_user_id(request)
    ended = get_registry(request).end(user_id)
    return {"ended": ended}


@router.get("")
def get_profile(session: UserSession = Depends(require_session)):
    return profile_view(session.engine)


@router.patch("/fields")
def update_fields(values: dict[str, Optional[str]], session: UserSession = Depends(require_session)):
    session.engine.set_fields(values)
    return profile_view(session.engine)


@router.post("/skills")
def update_skills(update: SkillUpdate, session: UserSession = Depends(require_session)):
    engine = session.engine
    if update.action == "add":
        engine.add_skill(update.skill)
    elif update.action == "remove":
        engine.remove_skill(update.skill)
    else:
        engine.set_skills_text(update.skill)
    return profile_view(engine)


@router.post("/avatar")
async def upload_avatar(
    request: Request, file: UploadFile = File(...), session: UserSession = Depends(require_session)
):
    limit = request.app.state.config.uploads.max_bytes
    # One byte past the limit is enough for the engine to reject it
    content = await file.read(limit + 1) if limit > 0 else await file.read()
    if not content:
        raise ValidationError("Please choose a non-empty image file.")
    if file.content_type and not file.content_type.startswith("image/"):
        raise ValidationError(f"Avatar must be an image, got {file.content_type}")
    session.engine.set_pending_avatar(content, filename=file.filename or "", content_type=file.content_type)
    return profile_view(session.engine)


@router.delete("/avatar")
def discard_avatar(session: UserSession = Depends(require_session)):
    session.engine.clear_pending_avatar()
    return profile_view(session.engine)


@router.post("/save")
async def save_profile(session: UserSession = Depends(require_session)):
    await session.engine.save()
    event = session.router.navigate(AFTER_PROFILE_SAVE)
    view = profile_view(session.engine)
    view["next_section"] = event.current
    return view
