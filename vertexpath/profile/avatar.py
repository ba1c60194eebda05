"""Avatar preview derivation and image type detection."""

import base64
from typing import Optional

from vertexpath.profile.errors import ValidationError
from vertexpath.profile.models import AvatarBinary

ALLOWED_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp")

# (magic prefix, mime type, extension)
_SIGNATURES = [
    (b"\x89PNG\r\n\x1a\n", "image/png", "png"),
    (b"\xff\xd8\xff", "image/jpeg", "jpg"),
    (b"GIF87a", "image/gif", "gif"),
    (b"GIF89a", "image/gif", "gif"),
]


def sniff_image_type(content: bytes) -> Optional[tuple[str, str]]:
    """Return (mime, extension) from the leading bytes, or None if unknown."""
    for magic, mime, ext in _SIGNATURES:
        if content.startswith(magic):
            return mime, ext
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp", "webp"
    return None


def image_type(avatar: AvatarBinary) -> tuple[str, str]:
    """(mime, extension) of the avatar, taken from its bytes.

    The client's filename and content type are never trusted: the stored
    file is served from our own origin, so only the sniffed image formats
    are accepted.
    """
    sniffed = sniff_image_type(avatar.content)
    if sniffed is None:
        raise ValidationError(
            f"Avatar must be a {', '.join(ext.upper() for ext in ALLOWED_EXTENSIONS)} image"
        )
    if avatar.filename and "." in avatar.filename:
        ext = avatar.filename.rsplit(".", 1)[-1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(f"Unsupported avatar file type: .{ext}")
    return sniffed


def make_preview(avatar: AvatarBinary) -> str:
    """Encode the binary as a data URI for immediate display."""
    mime, _ = image_type(avatar)
    payload = base64.b64encode(avatar.content).decode("ascii")
    return f"data:{mime};base64,{payload}"
