"""Embedded binary attachments (cover image and pitch deck).

A startup stores each attachment as three columns: raw bytes, content type
and original file name. This module is the only place that knows that
layout, and the only place that turns the bytes into base64 for JSON.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import UploadTooLarge, ValidationFailure
from ..models import Startup

COVER_IMAGE = "coverImage"
PITCH_DECK = "pitchDeck"

_COLUMN_PREFIX = {
    COVER_IMAGE: "cover_image",
    PITCH_DECK: "pitch_deck",
}


@dataclass(frozen=True)
class Attachment:
    data: bytes
    content_type: str
    file_name: str


def check_upload(kind: str, content_type: Optional[str], size: int, limit: int) -> None:
    """Reject an upload by type or size before anything is persisted."""

    if kind not in _COLUMN_PREFIX:
        raise ValidationFailure(f"Unexpected file field: {kind}", [(kind, "unexpected file field")])
    content_type = (content_type or "").lower()
    if kind == COVER_IMAGE and not content_type.startswith("image/"):
        message = "Only image files are allowed for coverImage!"
        raise ValidationFailure(message, [(kind, message)])
    if kind == PITCH_DECK and content_type != "application/pdf":
        message = "Only PDF is allowed for pitchDeck!"
        raise ValidationFailure(message, [(kind, message)])
    if size > limit:
        message = f"File too large: {kind} exceeds {limit} bytes"
        raise UploadTooLarge(message, [(kind, message)])


def read_attachment(startup: Startup, kind: str) -> Optional[Attachment]:
    prefix = _COLUMN_PREFIX[kind]
    data = getattr(startup, f"{prefix}_data")
    if data is None:
        return None
    return Attachment(
        data=bytes(data),
        content_type=getattr(startup, f"{prefix}_content_type") or "",
        file_name=getattr(startup, f"{prefix}_file_name") or "",
    )


def attachment_columns(kind: str, attachment: Optional[Attachment]) -> Dict[str, object]:
    """Return the column values that store ``attachment`` (or clear it)."""
    prefix = _COLUMN_PREFIX[kind]
    if attachment is None:
        return {
            f"{prefix}_data": None,
            f"{prefix}_content_type": None,
            f"{prefix}_file_name": None,
        }
    return {
        f"{prefix}_data": attachment.data,
        f"{prefix}_content_type": attachment.content_type,
        f"{prefix}_file_name": attachment.file_name,
    }


def encode_attachment(attachment: Optional[Attachment]) -> Optional[Dict[str, str]]:
    """Transcode an attachment for JSON transport, ``None`` when absent."""
    if attachment is None:
        return None
    return {
        "data": base64.b64encode(attachment.data).decode("ascii"),
        "contentType": attachment.content_type,
        "fileName": attachment.file_name,
    }
