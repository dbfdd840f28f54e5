"""Public model re-exports for swasthsetu_registry.

Consumers should import from ``swasthsetu_registry.models`` rather than
reaching into sub-modules directly.
"""

# --- Catalog ---
from swasthsetu_registry.models.catalog import CatalogEntry, DemoAccount

# --- Registration forms ---
from swasthsetu_registry.models.forms import (
    AdminRegistrationForm,
    BaseRegistrationForm,
    DoctorRegistrationForm,
    HospitalRegistrationForm,
    InsuranceRegistrationForm,
    PatientRegistrationForm,
    PharmacyRegistrationForm,
    RegistrationForm,
    RegistrationSubmission,
    parse_registration_form,
)

# --- Registry views ---
from swasthsetu_registry.models.registry import (
    Identity,
    IssuedCredential,
    LoginOutcome,
    LoginResult,
    NotificationInfo,
    RegistrationInfo,
)

__all__ = [
    # Catalog
    "CatalogEntry",
    "DemoAccount",
    # Forms
    "AdminRegistrationForm",
    "BaseRegistrationForm",
    "DoctorRegistrationForm",
    "HospitalRegistrationForm",
    "InsuranceRegistrationForm",
    "PatientRegistrationForm",
    "PharmacyRegistrationForm",
    "RegistrationForm",
    "RegistrationSubmission",
    "parse_registration_form",
    # Views
    "Identity",
    "IssuedCredential",
    "LoginOutcome",
    "LoginResult",
    "NotificationInfo",
    "RegistrationInfo",
]
