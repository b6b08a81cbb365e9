"""
Pydantic schemas for forms, view state and the JSON API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from psicocompany.notifications import Severity

SignupField = Literal["full_name", "email", "password", "confirm_password", "terms"]


class SignupForm(BaseModel):
    full_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    accept_terms: bool = False


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""


class ProfileForm(BaseModel):
    full_name: str = ""
    phone: str = ""


class Therapist(BaseModel):
    id: str | int
    crp: Optional[str] = None
    bio: Optional[str] = None
    price_cents: int = 0
    session_duration_min: int = 0
    is_active: bool = True

    @computed_field
    @property
    def crp_label(self) -> str:
        return "-" if self.crp is None else self.crp

    @computed_field
    @property
    def bio_label(self) -> str:
        return "-" if self.bio is None else self.bio

    @computed_field
    @property
    def price_label(self) -> str:
        return f"R$ {self.price_cents / 100:.2f} / {self.session_duration_min}min"


class NavigationLink(BaseModel):
    label: str
    href: str
    active: bool = False
    icon: Optional[str] = None


class NavigationState(BaseModel):
    logged_in: bool
    email: Optional[str] = None
    display_name: Optional[str] = None
    initials: Optional[str] = None
    avatar_url: Optional[str] = None
    links: list[NavigationLink] = Field(default_factory=list)
    menu: list[NavigationLink] = Field(default_factory=list)


class NotificationOut(BaseModel):
    id: int
    message: str
    severity: Severity
    icon: str
    duration: float
    remaining: Optional[float] = None


class EnqueueNotificationRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=500)
    severity: Severity = Severity.INFO
    duration: Optional[float] = None


class SignupValidationRequest(SignupForm):
    field: Optional[SignupField] = None


class SignupValidationResponse(BaseModel):
    errors: dict[str, str]


class TherapistListResponse(BaseModel):
    therapists: list[Therapist]
