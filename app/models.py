from __future__ import annotations
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
from sqlalchemy import Column, JSON, LargeBinary
from sqlmodel import SQLModel, Field

if SQLModel.metadata.tables:
    SQLModel.metadata.clear()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    hashed_password: str
    avatar: str = Field(default="")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Industry(str, Enum):
    tech = "tech"
    healthcare = "healthcare"
    finance = "finance"
    education = "education"


class Stage(str, Enum):
    idea = "idea"
    mvp = "mvp"
    launched = "launched"
    scaling = "scaling"


class BusinessModel(str, Enum):
    b2b = "B2B"
    b2c = "B2C"
    c2c = "C2C"
    other = "Other"


class FundingStatus(str, Enum):
    bootstrapped = "bootstrapped"
    seed_funded = "seedFunded"
    series_a = "seriesA"
    series_b = "seriesB"
    series_c = "seriesC"


class ContactMethod(str, Enum):
    email = "Email"
    phone = "Phone"
    fax = "Fax"


class Startup(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True, max_length=20)
    tagline: str = Field(max_length=160)
    industry: str
    stage: str
    founded_date: date
    business_model: str
    funding_status: str
    funding_amount: float
    revenue_model: str = Field(max_length=1000)
    years_in_op: float
    preferred_contact_method: List[str] = Field(
        default_factory=lambda: [ContactMethod.email.value],
        sa_column=Column(JSON, nullable=False),
    )
    newsletter_subscription: bool = False

    # Embedded attachments: raw bytes plus content type and original name.
    cover_image_data: Optional[bytes] = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    cover_image_content_type: Optional[str] = None
    cover_image_file_name: Optional[str] = None
    pitch_deck_data: Optional[bytes] = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    pitch_deck_content_type: Optional[str] = None
    pitch_deck_file_name: Optional[str] = None

    startup_owner: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
