"""Response and request models. Wire names are camelCase."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .models import Startup, User
from .services.attachments import COVER_IMAGE, PITCH_DECK, encode_attachment, read_attachment


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Credentials(WireModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserRead(WireModel):
    id: int
    username: str
    avatar: str = ""
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(
            id=user.id,
            username=user.username,
            avatar=user.avatar or "",
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AttachmentRead(WireModel):
    data: str
    content_type: str
    file_name: str


def _attachment(startup: Startup, kind: str) -> Optional[AttachmentRead]:
    encoded = encode_attachment(read_attachment(startup, kind))
    return AttachmentRead(**encoded) if encoded else None


def _number(value: float) -> Union[int, float]:
    # whole amounts go out as 1000, not 1000.0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class StartupRead(WireModel):
    id: int
    name: str
    tagline: str
    industry: str
    stage: str
    founded_date: date
    business_model: str
    funding_status: str
    funding_amount: Union[int, float]
    revenue_model: str
    years_in_op: Union[int, float]
    preferred_contact_method: List[str]
    newsletter_subscription: bool
    cover_image: Optional[AttachmentRead] = None
    pitch_deck: Optional[AttachmentRead] = None
    startup_owner: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_startup(cls, startup: Startup) -> "StartupRead":
        return cls(
            id=startup.id,
            name=startup.name,
            tagline=startup.tagline,
            industry=startup.industry,
            stage=startup.stage,
            founded_date=startup.founded_date,
            business_model=startup.business_model,
            funding_status=startup.funding_status,
            funding_amount=_number(startup.funding_amount),
            revenue_model=startup.revenue_model,
            years_in_op=_number(startup.years_in_op),
            preferred_contact_method=list(startup.preferred_contact_method or []),
            newsletter_subscription=bool(startup.newsletter_subscription),
            cover_image=_attachment(startup, COVER_IMAGE),
            pitch_deck=_attachment(startup, PITCH_DECK),
            startup_owner=startup.startup_owner,
            created_at=startup.created_at,
            updated_at=startup.updated_at,
        )


class StartupSummary(WireModel):
    id: int
    name: str
    industry: str
    stage: str
    business_model: str
    founded_date: date


class DashboardItem(WireModel):
    id: int
    name: str
    founded_date: date
    cover_image: Optional[AttachmentRead] = None
