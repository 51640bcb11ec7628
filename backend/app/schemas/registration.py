"""
Schémas Pydantic pour les inscriptions.

Le JSON échangé avec le frontend est en camelCase (studentName, isAttended…) :
les schémas déclarent des alias camelCase et acceptent aussi les noms Python.
Le champ `class` est exposé sous ce nom mais s'appelle class_name côté Python.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre les champs et le type `datetime.date` dans Pydantic v2.
"""

import re
import uuid
import datetime as dt
from enum import Enum
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from app.config import settings


class ClassLabel(str, Enum):
    """Classes admises au concours."""
    VII = "VII"
    VIII = "VIII"
    IX = "IX"
    X = "X"
    XI = "XI"
    XII = "XII"


CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

_NON_DIGITS = re.compile(r"\D")


def normalize_mobile(value: str) -> str:
    """
    Normalise un numéro indien au format "+91 XXXXXXXXXX".
    Accepte 10 chiffres, avec ou sans indicatif +91 et séparateurs quelconques.
    """
    digits = _NON_DIGITS.sub("", value or "")
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    if len(digits) != 10:
        raise ValueError("Mobile number must be 10 digits.")
    return f"+91 {digits}"


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class RegistrationBase(BaseModel):
    """Champs communs au formulaire public et à l'inscription centrale."""
    model_config = CAMEL_CONFIG

    student_name: str
    school_name: str
    class_name: ClassLabel = Field(alias="class")
    dob: dt.date
    email: Optional[EmailStr] = None
    mobile_number: str
    alt_mobile_number: Optional[str] = None

    @field_validator("student_name", "school_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field cannot be empty.")
        return v.strip()

    @field_validator("dob", mode="before")
    @classmethod
    def date_part_of_iso_datetime(cls, v):
        # Le formulaire envoie Date.toISOString() d'un minuit local :
        # le 2 avril 2011 à Guwahati arrive en "2011-04-01T18:30:00.000Z"
        if isinstance(v, str) and "T" in v:
            instant = dt.datetime.fromisoformat(v.replace("Z", "+00:00"))
            if instant.tzinfo is not None:
                instant = instant.astimezone(ZoneInfo(settings.EVENT_TIMEZONE))
            return instant.date()
        return v

    @field_validator("dob")
    @classmethod
    def dob_not_in_future(cls, v: dt.date) -> dt.date:
        if v > dt.date.today():
            raise ValueError("Date of birth cannot be in the future.")
        return v

    @field_validator("email", "alt_mobile_number", mode="before")
    @classmethod
    def optional_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("mobile_number")
    @classmethod
    def valid_mobile(cls, v: str) -> str:
        return normalize_mobile(v)

    @field_validator("alt_mobile_number")
    @classmethod
    def valid_alt_mobile(cls, v: Optional[str]) -> Optional[str]:
        return normalize_mobile(v) if v is not None else v


class RegistrationCreate(RegistrationBase):
    """Formulaire public (POST /api/register). La carte d'identité arrive à part."""


class CentralRegistrationCreate(RegistrationBase):
    """Inscription sur place par un administrateur : email obligatoire, pas de carte."""
    email: EmailStr  # "" devient None puis est rejeté


class RegistrationUpdate(BaseModel):
    """Corps de PATCH /api/admin/registrations/{id} : seuls nom et numéros sont modifiables."""
    model_config = CAMEL_CONFIG

    student_name: str
    mobile_number: str
    alt_mobile_number: Optional[str] = None

    @field_validator("student_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Student name cannot be empty.")
        return v.strip()

    @field_validator("mobile_number")
    @classmethod
    def valid_mobile(cls, v: str) -> str:
        return normalize_mobile(v)

    @field_validator("alt_mobile_number", mode="before")
    @classmethod
    def optional_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("alt_mobile_number")
    @classmethod
    def valid_alt_mobile(cls, v: Optional[str]) -> Optional[str]:
        return normalize_mobile(v) if v is not None else v


class AttendanceUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    is_attended: StrictBool


class CertificateUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    certificate_issued: StrictBool


class RegistrationResponse(BaseModel):
    """Inscription telle que renvoyée par l'API."""
    model_config = CAMEL_CONFIG

    id: uuid.UUID
    student_name: str
    school_name: str
    class_name: str = Field(alias="class")
    dob: dt.date
    email: Optional[str] = None
    mobile_number: str
    alt_mobile_number: Optional[str] = None
    id_card_url: Optional[str] = None
    is_attended: bool
    certificate_issued: bool
    created_at: Optional[dt.datetime] = None


class RegistrationCreated(BaseModel):
    message: str
    registration: RegistrationResponse


class RegistrationPage(BaseModel):
    """Page de résultats pour le tableau d'administration."""
    model_config = CAMEL_CONFIG

    registrations: List[RegistrationResponse]
    total: int
    page: int
    total_pages: int
    limit: int


class RegistrationSearchResult(BaseModel):
    registrations: List[RegistrationResponse]


class AttendanceStatus(BaseModel):
    model_config = CAMEL_CONFIG

    message: str
    is_attended: bool


class CertificateStatus(BaseModel):
    model_config = CAMEL_CONFIG

    message: str
    certificate_issued: bool


class MessageResponse(BaseModel):
    message: str


class SchoolSuggestions(BaseModel):
    suggestions: List[str]
