"""Profile editing error taxonomy."""


class ProfileError(Exception):
    """Base class for every error raised by the profile engine."""


class ValidationError(ProfileError):
    """Unknown field name, or a value outside the field's allowed set."""


class NotReadyError(ProfileError):
    """A mutation was attempted while the engine was not in the Ready state."""


class ConcurrentSaveError(ProfileError):
    """save() was called while another save was still in flight."""


class UploadError(ProfileError):
    """The avatar uploader failed to store the pending binary."""


class PersistenceError(ProfileError):
    """The profile store failed to load or upsert a profile."""
