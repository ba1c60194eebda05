"""Profile editing engine — draft state, completion, reconcile and save."""

import logging
from enum import Enum
from typing import Optional, Protocol

from vertexpath.profile.avatar import make_preview
from vertexpath.profile.completion import completion_score, field_labels, visible_fields
from vertexpath.profile.errors import (
    ConcurrentSaveError,
    NotReadyError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from vertexpath.profile.models import (
    BLANK_ALLOWED,
    DEFAULTS,
    EDUCATION_ALIASES,
    ENUM_FIELDS,
    SCALAR_FIELDS,
    AvatarBinary,
    PersistedProfile,
    ProfileDraft,
    allowed_values,
)
from vertexpath.profile.skills import parse_skills, serialize_skills

logger = logging.getLogger("vertexpath.profile")


class ProfileStore(Protocol):
    async def load_by_id(self, user_id: str) -> Optional[PersistedProfile]: ...

    async def upsert(self, user_id: str, record: dict) -> None: ...


class AssetUploader(Protocol):
    async def store(self, user_id: str, avatar: AvatarBinary) -> str: ...


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"


def _reconciled_value(name: str, raw: Optional[str]) -> Optional[str]:
    """Usable persisted value for one field, or None if absent or invalid."""
    if raw is None or raw == "":
        return None
    if name == "education_level":
        raw = EDUCATION_ALIASES.get(raw, raw)
    if name in ENUM_FIELDS and raw not in allowed_values(name):
        logger.warning("Ignoring stored %s=%r (not an allowed value)", name, raw)
        return None
    return raw


class ProfileStateEngine:
    """Owns one profile draft for the lifetime of an editing session.

    Mutations are only accepted in the ``READY`` state. ``load()`` and
    ``save()`` are the only suspending operations. ``save()`` is
    single-flight: a second call while one is in progress raises
    ``ConcurrentSaveError``. Avatars above ``max_avatar_bytes`` are rejected
    when staged.
    """

    def __init__(
        self, store: ProfileStore, uploader: AssetUploader, max_avatar_bytes: Optional[int] = None
    ):
        self._store = store
        self._uploader = uploader
        self._max_avatar_bytes = max_avatar_bytes
        self._state = EngineState.UNINITIALIZED
        self._draft: Optional[ProfileDraft] = None
        self._baseline: Optional[ProfileDraft] = None
        self._completion = 0
        self._visible: frozenset[str] = frozenset()
        self._labels: dict[str, str] = {}

    # -- read access -------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def user_id(self) -> Optional[str]:
        return self._draft.user_id if self._draft else None

    @property
    def draft(self) -> ProfileDraft:
        """A copy of the current draft. Valid in every state after initialize()."""
        return self._require_draft().copy()

    @property
    def baseline(self) -> Optional[ProfileDraft]:
        return self._baseline.copy() if self._baseline else None

    @property
    def completion(self) -> int:
        return self._completion

    @property
    def visible_fields(self) -> frozenset[str]:
        return self._visible

    @property
    def field_labels(self) -> dict[str, str]:
        return dict(self._labels)

    @property
    def is_dirty(self) -> bool:
        if self._draft is None or self._baseline is None:
            return False
        draft, base = self._draft, self._baseline
        return (
            draft.scalars() != base.scalars()
            or draft.skills != base.skills
            or draft.avatar_url != base.avatar_url
            or draft.pending_avatar is not None
        )

    # -- lifecycle ---------------------------------------------------------

    def initialize(self, user_id: str) -> None:
        """Start a session with an empty draft; the engine then waits for reconcile()."""
        if self._state == EngineState.SAVING:
            raise NotReadyError("Cannot start a new session while a save is in progress")
        if not user_id:
            raise ValidationError("user_id is required")
        self._draft = ProfileDraft(user_id=user_id)
        self._baseline = None
        self._state = EngineState.LOADING
        self._refresh()
        logger.debug("[user:%s] Editing session initialized", user_id)

    async def load(self) -> None:
        """Fetch the persisted profile and reconcile it into the draft.

        If initialize() starts another session while the fetch is pending,
        the result is discarded and ``NotReadyError`` is raised.
        """
        if self._state != EngineState.LOADING:
            raise NotReadyError(f"load() requires the loading state, engine is {self._state.value}")
        draft = self._draft
        user_id = draft.user_id
        try:
            persisted = await self._store.load_by_id(user_id)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error("[user:%s] Profile load failed: %s", user_id, e)
            raise PersistenceError(f"Failed to load profile: {e}") from e
        if self._draft is not draft:
            logger.warning("[user:%s] Discarding profile load, session was restarted", user_id)
            raise NotReadyError("Editing session was restarted while loading")
        self.reconcile(persisted)

    def reconcile(self, persisted: Optional[PersistedProfile]) -> None:
        """Overwrite the draft from a freshly loaded record and make it the baseline.

        Accepted once per session, right after initialize(). An absent record
        means a new profile: defaults stay in place.
        """
        if self._state != EngineState.LOADING:
            raise NotReadyError(f"reconcile() requires the loading state, engine is {self._state.value}")

        draft = ProfileDraft(user_id=self._draft.user_id)
        if persisted is not None:
            draft.defaulted = set()
            for name in SCALAR_FIELDS:
                value = _reconciled_value(name, getattr(persisted, name))
                if value is None:
                    value = DEFAULTS.get(name, "")
                    if name in DEFAULTS:
                        draft.defaulted.add(name)
                setattr(draft, name, value)
            draft.skills = parse_skills(persisted.skills)
            draft.avatar_url = persisted.avatar_url or ""

        self._draft = draft
        self._baseline = draft.copy()
        self._state = EngineState.READY
        self._refresh()
        logger.info(
            "[user:%s] Profile %s (completion %d%%)",
            draft.user_id,
            "reconciled" if persisted is not None else "started empty",
            self._completion,
        )

    # -- mutations ---------------------------------------------------------

    def set_field(self, name: str, value: Optional[str]) -> None:
        self._require_ready()
        setattr(self._draft, name, self._checked(name, value))
        self._draft.defaulted.discard(name)
        self._refresh()

    def set_fields(self, values: dict[str, Optional[str]]) -> None:
        """Apply several fields at once; nothing is applied if any pair is invalid."""
        self._require_ready()
        checked = {name: self._checked(name, value) for name, value in values.items()}
        for name, value in checked.items():
            setattr(self._draft, name, value)
            self._draft.defaulted.discard(name)
        self._refresh()

    def add_skill(self, text: str) -> None:
        self._require_ready()
        skill = (text or "").strip()
        if not skill or skill in self._draft.skills:
            return
        self._draft.skills.append(skill)
        self._refresh()

    def remove_skill(self, text: str) -> None:
        self._require_ready()
        if text in self._draft.skills:
            self._draft.skills.remove(text)
            self._refresh()

    def set_skills_text(self, text: str) -> None:
        """Replace all skills from one comma-separated string."""
        self._require_ready()
        self._draft.skills = parse_skills(text)
        self._refresh()

    def set_pending_avatar(
        self, content: bytes, filename: str = "", content_type: Optional[str] = None
    ) -> None:
        """Stage a new avatar and derive its local preview. Nothing is uploaded yet."""
        self._require_ready()
        if not content:
            raise ValidationError("Avatar file is empty")
        limit = self._max_avatar_bytes
        if limit and len(content) > limit:
            raise ValidationError(f"Avatar is {len(content)} bytes, limit is {limit} bytes")
        avatar = AvatarBinary(content=bytes(content), filename=filename, content_type=content_type)
        preview = make_preview(avatar)
        self._draft.pending_avatar = avatar
        self._draft.avatar_preview = preview
        self._refresh()

    def clear_pending_avatar(self) -> None:
        self._require_ready()
        self._draft.pending_avatar = None
        self._draft.avatar_preview = ""
        self._refresh()

    # -- persistence -------------------------------------------------------

    def to_record(self, avatar_url: Optional[str] = None) -> dict:
        """The record save() submits. Hidden fields are left out."""
        draft = self._require_draft()
        record = {
            name: value
            for name, value in draft.scalars().items()
            if name in self._visible
        }
        record["skills"] = serialize_skills(draft.skills)
        record["avatar_url"] = draft.avatar_url if avatar_url is None else avatar_url
        return record

    async def save(self) -> dict:
        """Upload a pending avatar, then upsert the profile.

        On any failure the draft and baseline are left untouched and the
        engine returns to READY so the caller may retry.
        """
        if self._state == EngineState.SAVING:
            raise ConcurrentSaveError("A save is already in progress")
        self._require_ready()

        self._state = EngineState.SAVING
        user_id = self._draft.user_id
        try:
            avatar_url = self._draft.avatar_url
            pending = self._draft.pending_avatar
            if pending is not None:
                try:
                    avatar_url = await self._uploader.store(user_id, pending)
                except UploadError:
                    logger.error("[user:%s] Avatar upload failed, save aborted", user_id)
                    raise
                except Exception as e:
                    logger.error("[user:%s] Avatar upload failed, save aborted: %s", user_id, e)
                    raise UploadError(f"Failed to upload avatar: {e}") from e

            record = self.to_record(avatar_url=avatar_url)
            try:
                await self._store.upsert(user_id, record)
            except PersistenceError:
                logger.error("[user:%s] Profile upsert failed", user_id)
                raise
            except Exception as e:
                logger.error("[user:%s] Profile upsert failed: %s", user_id, e)
                raise PersistenceError(f"Failed to save profile: {e}") from e

            # Committed: the uploaded reference replaces the local preview
            self._draft.avatar_url = avatar_url
            self._draft.pending_avatar = None
            self._draft.avatar_preview = ""
            self._draft.defaulted.clear()
            self._baseline = self._draft.copy()
            self._refresh()
            logger.info("[user:%s] Profile saved (completion %d%%)", user_id, self._completion)
            return record
        finally:
            self._state = EngineState.READY

    # -- internals ---------------------------------------------------------

    def _require_draft(self) -> ProfileDraft:
        if self._draft is None:
            raise NotReadyError("Engine has not been initialized")
        return self._draft

    def _require_ready(self) -> None:
        if self._state != EngineState.READY:
            raise NotReadyError(f"Profile is not editable while {self._state.value}")

    @staticmethod
    def _checked(name: str, value: Optional[str]) -> str:
        if name not in SCALAR_FIELDS:
            raise ValidationError(f"Unknown profile field: {name!r}")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValidationError(f"Field {name!r} expects a string, got {type(value).__name__}")
        if name in ENUM_FIELDS:
            if not (value == "" and name in BLANK_ALLOWED) and value not in allowed_values(name):
                raise ValidationError(
                    f"Invalid value for {name!r}: {value!r} "
                    f"(allowed: {', '.join(sorted(allowed_values(name)))})"
                )
        return value

    def _refresh(self) -> None:
        self._completion = completion_score(self._draft)
        self._visible = visible_fields(self._draft)
        self._labels = field_labels(self._draft)
