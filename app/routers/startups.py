from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlmodel import Session

from .. import config
from ..auth import get_current_user_id
from ..config import OwnershipPolicy
from ..database import get_session
from ..schemas import AttachmentRead, DashboardItem, StartupRead, StartupSummary
from ..services import attachments
from ..services import startups as svc
from ..services.attachments import COVER_IMAGE, PITCH_DECK, Attachment
from ..validation import STARTUP_FIELDS


router = APIRouter(prefix="/startup", tags=["startup"])


def get_ownership_policy() -> OwnershipPolicy:
    return config.get_ownership_policy()


def get_upload_limit() -> int:
    return config.get_max_upload_bytes()


async def startup_form(request: Request) -> Dict[str, Any]:
    """Collect the submitted text fields, keyed by attribute name.

    A field sent empty is kept as ``""`` so validation sees it; only a
    field left out of the form counts as not supplied.
    """
    form = await request.form()
    values: Dict[str, Any] = {}
    for attr, wire in STARTUP_FIELDS:
        value = form.get(wire)
        if isinstance(value, str):
            values[attr] = value
    return values


def _read_upload(kind: str, upload: Optional[UploadFile], limit: int) -> Optional[Attachment]:
    if upload is None or not upload.filename:
        return None
    if upload.size is not None:
        attachments.check_upload(kind, upload.content_type, upload.size, limit)
    data = upload.file.read()
    attachments.check_upload(kind, upload.content_type, len(data), limit)
    return Attachment(data=data, content_type=upload.content_type or "", file_name=upload.filename)


def _success(message: str, **data: Any) -> Dict[str, Any]:
    return {"status": "success", "message": message, "data": data}


@router.post("/create")
def create_startup(
    fields: Dict[str, Any] = Depends(startup_form),
    cover_image: Optional[UploadFile] = File(default=None, alias=COVER_IMAGE),
    pitch_deck: Optional[UploadFile] = File(default=None, alias=PITCH_DECK),
    user_id: int = Depends(get_current_user_id),
    limit: int = Depends(get_upload_limit),
    session: Session = Depends(get_session),
):
    cover = _read_upload(COVER_IMAGE, cover_image, limit)
    deck = _read_upload(PITCH_DECK, pitch_deck, limit)
    startup = svc.create_startup(session, fields, user_id, cover, deck)
    return _success(
        "Startup creation success", startup=StartupRead.from_startup(startup).to_wire()
    )


@router.get("/all")
def list_startups(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    rows = svc.list_owner_startups(session, user_id)
    startups = [
        StartupSummary.model_validate(row, from_attributes=True).to_wire() for row in rows
    ]
    return _success("Get startups success", startups=startups)


@router.get("/all/dashboard/home")
def dashboard_home(session: Session = Depends(get_session)):
    items = []
    for entry in svc.list_dashboard(session):
        encoded = attachments.encode_attachment(entry["cover_image"])
        items.append(
            DashboardItem(
                id=entry["id"],
                name=entry["name"],
                founded_date=entry["founded_date"],
                cover_image=AttachmentRead(**encoded) if encoded else None,
            ).to_wire()
        )
    return _success("All startups dashboard home.", startups=items)


@router.get("/dashboard/home/{startup_id}")
def dashboard_startup(startup_id: int, session: Session = Depends(get_session)):
    startup = svc.get_startup(session, startup_id)
    return _success(
        "Get startup on id success", startup=StartupRead.from_startup(startup).to_wire()
    )


@router.patch("/update/{startup_id}")
def update_startup(
    startup_id: int,
    fields: Dict[str, Any] = Depends(startup_form),
    cover_image: Optional[UploadFile] = File(default=None, alias=COVER_IMAGE),
    pitch_deck: Optional[UploadFile] = File(default=None, alias=PITCH_DECK),
    user_id: int = Depends(get_current_user_id),
    limit: int = Depends(get_upload_limit),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
    session: Session = Depends(get_session),
):
    cover = _read_upload(COVER_IMAGE, cover_image, limit)
    deck = _read_upload(PITCH_DECK, pitch_deck, limit)
    startup = svc.update_startup(
        session, startup_id, fields, user_id, cover, deck, policy=policy
    )
    return _success(
        "Startup update success", startup=StartupRead.from_startup(startup).to_wire()
    )


@router.get("/{startup_id}")
def get_startup(
    startup_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    startup = svc.get_startup(session, startup_id)
    return _success(
        "Get startup on id success", startup=StartupRead.from_startup(startup).to_wire()
    )


@router.delete("/{startup_id}")
def delete_startup(
    startup_id: int,
    user_id: int = Depends(get_current_user_id),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
    session: Session = Depends(get_session),
):
    svc.delete_startup(session, startup_id, user_id, policy=policy)
    return {"status": "success", "message": "Startup deleted successfully"}
