"""swasthsetu_registry: registration review SDK for the SwasthSetu portals.

Public API:
    RegistrationWorkflow: submission, approve/decline, notifications, login
    CatalogStore: loads the YAML catalog (form options, demo logins)
    RegistrationForm: discriminated union of the six role forms
    RegistrationInfo: public view of a registration
    IssuedCredential: credential handed to the approving admin
    NotificationInfo: public view of a decision notification
    LoginResult: outcome of login resolution
    LoginOutcome: success / wrong_portal / invalid_credentials
"""

from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.errors import (
    CredentialIssuanceError,
    RegistrationNotFoundError,
    RegistrationNotPendingError,
)
from swasthsetu_registry.models.forms import (
    AdminRegistrationForm,
    DoctorRegistrationForm,
    HospitalRegistrationForm,
    InsuranceRegistrationForm,
    PatientRegistrationForm,
    PharmacyRegistrationForm,
    RegistrationForm,
    parse_registration_form,
)
from swasthsetu_registry.models.registry import (
    Identity,
    IssuedCredential,
    LoginOutcome,
    LoginResult,
    NotificationInfo,
    RegistrationInfo,
)
from swasthsetu_registry.workflow import RegistrationWorkflow

__all__ = [
    # Workflow & catalog
    "RegistrationWorkflow",
    "CatalogStore",
    # Errors
    "CredentialIssuanceError",
    "RegistrationNotFoundError",
    "RegistrationNotPendingError",
    # Forms
    "AdminRegistrationForm",
    "DoctorRegistrationForm",
    "HospitalRegistrationForm",
    "InsuranceRegistrationForm",
    "PatientRegistrationForm",
    "PharmacyRegistrationForm",
    "RegistrationForm",
    "parse_registration_form",
    # Views
    "Identity",
    "IssuedCredential",
    "LoginOutcome",
    "LoginResult",
    "NotificationInfo",
    "RegistrationInfo",
]
