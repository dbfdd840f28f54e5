"""Registration form models: one Pydantic model per role.

The submission payload is a discriminated union keyed by ``role`` so that
Pydantic deserialises an incoming dict directly into the right form type and
rejects fields that belong to another role.

Field checks are the format checks every portal form performs: required
text must be non-blank after trimming, mobiles are Indian 10-digit numbers,
emails have a basic ``x@y.z`` shape.  Catalog membership (specialization,
hospital affiliation, medicine categories) is checked by the workflow, which
owns the :class:`CatalogStore`.
"""

import re
from typing import Annotated, List, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    TypeAdapter,
    field_validator,
)

from swasthsetu_registry.constants import (
    DISPLAY_NAME_FIELDS,
    EMAIL_PATTERN,
    MOBILE_PATTERN,
)

_MOBILE_RE = re.compile(MOBILE_PATTERN)
_EMAIL_RE = re.compile(EMAIL_PATTERN)

# Non-blank text after whitespace stripping
RequiredText = Annotated[str, Field(min_length=1)]


def _check_mobile(value: str) -> str:
    if not _MOBILE_RE.match(value):
        raise ValueError("Please enter a valid 10-digit mobile number")
    return value


def _check_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError("Please enter a valid email address")
    return value


MobileNumber = Annotated[str, AfterValidator(_check_mobile)]
EmailAddress = Annotated[str, AfterValidator(_check_email)]


class BaseRegistrationForm(BaseModel):
    """Shared configuration for all role forms."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @property
    def display_name(self) -> str:
        """The name used for listings and credential synthesis."""
        return getattr(self, DISPLAY_NAME_FIELDS[self.role])

    def details(self) -> dict:
        """Role-specific fields as a JSON-ready dict (``role`` excluded)."""
        return self.model_dump(mode="json", exclude={"role"})


class PatientRegistrationForm(BaseRegistrationForm):
    role: Literal["patient"] = "patient"
    full_name: RequiredText
    age: int = Field(ge=1, le=120)
    gender: RequiredText
    village: RequiredText
    mobile: MobileNumber
    email: Optional[str] = None
    emergency_contact_name: RequiredText
    emergency_contact_number: MobileNumber
    has_family_insurance: bool = False
    medical_history: str = ""

    @field_validator("email")
    @classmethod
    def blank_email_means_none(cls, value: Optional[str]) -> Optional[str]:
        # Blank means "not given"
        if not value:
            return None
        return _check_email(value)


class DoctorRegistrationForm(BaseRegistrationForm):
    role: Literal["doctor"] = "doctor"
    full_name: RequiredText
    license_number: RequiredText
    specialization: RequiredText
    years_of_experience: int = Field(ge=0)
    hospital_affiliation: RequiredText
    mobile: MobileNumber
    email: EmailAddress
    bio: str = ""
    profile_photo: Optional[str] = None


class HospitalRegistrationForm(BaseRegistrationForm):
    role: Literal["hospital"] = "hospital"
    hospital_name: RequiredText
    registration_id: RequiredText
    type: Literal["Government", "Private"]
    address: RequiredText
    number_of_beds: int = Field(ge=1)
    contact_person_name: RequiredText
    contact_person_mobile: MobileNumber
    email: EmailAddress
    opd_hours: str = ""


class PharmacyRegistrationForm(BaseRegistrationForm):
    role: Literal["pharmacy"] = "pharmacy"
    pharmacy_name: RequiredText
    owner_name: RequiredText
    registration_number: RequiredText
    address: RequiredText
    mobile: MobileNumber
    timings: str = ""
    medicine_categories: List[str] = Field(min_length=1)


class InsuranceRegistrationForm(BaseRegistrationForm):
    role: Literal["insurance"] = "insurance"
    company_name: RequiredText
    type: Literal["Company", "Agent"]
    license_id: RequiredText
    contact_person_name: RequiredText
    contact_person_mobile: MobileNumber
    coverage_plans: str = ""
    email: EmailAddress


class AdminRegistrationForm(BaseRegistrationForm):
    role: Literal["admin"] = "admin"
    admin_name: RequiredText
    organization_name: RequiredText
    email: EmailAddress
    mobile: MobileNumber
    role_description: str = ""


# Discriminated union: Pydantic picks the right form based on the "role" field.
RegistrationForm = Annotated[
    Union[
        PatientRegistrationForm,
        DoctorRegistrationForm,
        HospitalRegistrationForm,
        PharmacyRegistrationForm,
        InsuranceRegistrationForm,
        AdminRegistrationForm,
    ],
    Field(discriminator="role"),
]


class RegistrationSubmission(RootModel[RegistrationForm]):
    """Request-body wrapper; ``.root`` is the concrete role form."""


_form_adapter = TypeAdapter(RegistrationForm)


def parse_registration_form(data: dict) -> BaseRegistrationForm:
    """Validate a raw dict into the matching role form.

    Raises ``pydantic.ValidationError`` on unknown roles or failed checks.
    """
    return _form_adapter.validate_python(data)

