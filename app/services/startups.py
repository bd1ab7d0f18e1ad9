"""Startup service helpers.

Create and update both follow the same shape: coerce the raw form values,
build the complete document, validate it, and only then write. A document
that fails validation never reaches the session, so a rejected request
leaves the stored record exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..config import OwnershipPolicy
from ..errors import Conflict, Forbidden, NotFound, ValidationFailure
from ..models import ContactMethod, Startup, utc_now
from ..validation import STARTUP_FIELDS, coerce_startup_fields, validate_startup
from .attachments import (
    COVER_IMAGE,
    PITCH_DECK,
    Attachment,
    attachment_columns,
    read_attachment,
)

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = tuple(attr for attr, _wire in STARTUP_FIELDS)
DEFAULT_CONTACT_METHODS = [ContactMethod.email.value]


def _supplied(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only known attributes; ``None`` means "not supplied"."""
    return coerce_startup_fields(
        {key: value for key, value in raw.items() if key in MUTABLE_FIELDS and value is not None}
    )


def _ensure_unique_name(session: Session, name: Any, exclude_id: Optional[int] = None) -> None:
    if not isinstance(name, str):
        return
    stmt = select(Startup.id).where(Startup.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Startup.id != exclude_id)
    if session.exec(stmt).first() is not None:
        raise Conflict(["name"])


def _commit(session: Session, startup: Startup) -> Startup:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        # re-check for duplicate as a fallback (concurrent insert of same name)
        exists = session.exec(
            select(Startup.id).where(Startup.name == startup.name, Startup.id != startup.id)
        ).first()
        if exists is not None:
            raise Conflict(["name"]) from exc
        raise
    session.refresh(startup)
    return startup


def build_new_document(
    raw: Mapping[str, Any],
    owner_id: int,
    cover_image: Optional[Attachment] = None,
    pitch_deck: Optional[Attachment] = None,
) -> Dict[str, Any]:
    """Return the full document for a new startup owned by ``owner_id``."""

    doc: Dict[str, Any] = {attr: None for attr in MUTABLE_FIELDS}
    doc.update(_supplied(raw))
    if not doc.get("preferred_contact_method"):
        doc["preferred_contact_method"] = list(DEFAULT_CONTACT_METHODS)
    if doc.get("newsletter_subscription") is None:
        doc["newsletter_subscription"] = False
    doc.update(attachment_columns(COVER_IMAGE, cover_image))
    doc.update(attachment_columns(PITCH_DECK, pitch_deck))
    doc["startup_owner"] = owner_id
    return doc


def merge_document(
    existing: Startup,
    raw: Mapping[str, Any],
    caller_id: int,
    cover_image: Optional[Attachment] = None,
    pitch_deck: Optional[Attachment] = None,
) -> Dict[str, Any]:
    """Merge supplied values over ``existing`` field by field.

    Absent (``None``) values carry the stored value forward; any other
    value, including falsy ones such as ``0`` or ``"false"``, replaces it.
    An empty contact method string keeps the stored list. Attachments are
    replaced wholesale or kept as-is.
    """

    supplied = _supplied(raw)
    doc: Dict[str, Any] = {}
    for attr in MUTABLE_FIELDS:
        if attr in supplied:
            doc[attr] = supplied[attr]
        else:
            doc[attr] = getattr(existing, attr)
    if not supplied.get("preferred_contact_method"):
        doc["preferred_contact_method"] = list(existing.preferred_contact_method or [])

    for kind, upload in ((COVER_IMAGE, cover_image), (PITCH_DECK, pitch_deck)):
        doc.update(attachment_columns(kind, upload if upload is not None else read_attachment(existing, kind)))

    doc["startup_owner"] = caller_id
    return doc


def _validate(doc: Mapping[str, Any]) -> None:
    violations = validate_startup(doc)
    if violations:
        raise ValidationFailure.from_violations(violations)


def create_startup(
    session: Session,
    raw: Mapping[str, Any],
    owner_id: int,
    cover_image: Optional[Attachment] = None,
    pitch_deck: Optional[Attachment] = None,
) -> Startup:
    """Create a startup owned by ``owner_id``.

    ``raw`` maps attribute names to submitted values; an owner in ``raw`` is
    ignored.
    """

    doc = build_new_document(raw, owner_id, cover_image, pitch_deck)
    _validate(doc)
    _ensure_unique_name(session, doc["name"])

    startup = Startup(**doc)
    session.add(startup)
    _commit(session, startup)
    logger.info("Startup %s created by user %s", startup.id, owner_id)
    return startup


def update_startup(
    session: Session,
    startup_id: int,
    raw: Mapping[str, Any],
    caller_id: int,
    cover_image: Optional[Attachment] = None,
    pitch_deck: Optional[Attachment] = None,
    policy: OwnershipPolicy = OwnershipPolicy.legacy,
) -> Startup:
    """Apply a partial update to a startup and return the stored result."""

    existing = session.get(Startup, startup_id)
    if existing is None:
        raise NotFound("Startup does not exist", {"id": startup_id})
    if policy is OwnershipPolicy.enforce and existing.startup_owner != caller_id:
        raise Forbidden("you do not own this startup")

    doc = merge_document(existing, raw, caller_id, cover_image, pitch_deck)
    _validate(doc)
    _ensure_unique_name(session, doc["name"], exclude_id=startup_id)

    for attr, value in doc.items():
        setattr(existing, attr, value)
    existing.updated_at = utc_now()
    session.add(existing)
    _commit(session, existing)
    logger.info("Startup %s updated by user %s", startup_id, caller_id)
    return existing


def get_startup(session: Session, startup_id: int) -> Startup:
    startup = session.get(Startup, startup_id)
    if startup is None:
        raise NotFound("No startup of this id", {"id": startup_id})
    return startup


def list_owner_startups(session: Session, owner_id: int) -> List[Any]:
    """Summary rows for ``owner_id``; attachment bytes are never loaded."""

    stmt = (
        select(
            Startup.id,
            Startup.name,
            Startup.industry,
            Startup.stage,
            Startup.business_model,
            Startup.founded_date,
        )
        .where(Startup.startup_owner == owner_id)
        .order_by(Startup.created_at, Startup.id)
    )
    return list(session.exec(stmt).all())


def list_dashboard(session: Session) -> List[Dict[str, Any]]:
    """Name, founded date and cover image of every startup."""

    stmt = select(
        Startup.id,
        Startup.name,
        Startup.founded_date,
        Startup.cover_image_data,
        Startup.cover_image_content_type,
        Startup.cover_image_file_name,
    ).order_by(Startup.created_at, Startup.id)
    items = []
    for row in session.exec(stmt).all():
        cover = None
        if row.cover_image_data is not None:
            cover = Attachment(
                data=bytes(row.cover_image_data),
                content_type=row.cover_image_content_type or "",
                file_name=row.cover_image_file_name or "",
            )
        items.append(
            {"id": row.id, "name": row.name, "founded_date": row.founded_date, "cover_image": cover}
        )
    return items


def delete_startup(
    session: Session,
    startup_id: int,
    caller_id: Optional[int] = None,
    policy: OwnershipPolicy = OwnershipPolicy.legacy,
) -> None:
    startup = session.get(Startup, startup_id)
    if startup is None:
        raise NotFound(f"No startup found with id: {startup_id}", {"id": startup_id})
    if policy is OwnershipPolicy.enforce and startup.startup_owner != caller_id:
        raise Forbidden("you do not own this startup")
    session.delete(startup)
    session.commit()
    logger.info("Startup %s deleted by user %s", startup_id, caller_id)
