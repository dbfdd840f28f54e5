"""Registry constants shared across the SDK.

These values are referenced by the form models, the credential issuer and
the workflow.  Several can be overridden via environment variables so that
deployments can adjust issuance without code changes.
"""

import os

# Indian mobile numbers: 10 digits, leading 6-9.
MOBILE_PATTERN = r"^[6-9]\d{9}$"

# Loose email shape check: something@something.tld, no whitespace.
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Domain appended to every issued login identifier.
# Overridable via CREDENTIAL_EMAIL_DOMAIN env var.
CREDENTIAL_EMAIL_DOMAIN = os.getenv("CREDENTIAL_EMAIL_DOMAIN", "swasthsetu.com")

# Number of leading sanitised name characters kept in a login identifier.
SANITIZED_NAME_LENGTH = 8

# Inclusive bounds of the numeric suffix (always four digits).
SUFFIX_MIN = 1000
SUFFIX_MAX = 9999

# How many suffixes to draw before giving up on an identifier collision.
CREDENTIAL_MAX_ATTEMPTS = int(os.getenv("CREDENTIAL_MAX_ATTEMPTS", "20"))

# Bytes of entropy in a generated secret (before urlsafe-base64 encoding).
SECRET_NBYTES = 12

# PBKDF2 work factor for stored secrets.
PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = int(os.getenv("PBKDF2_ITERATIONS", "210000"))

# Which form field holds the human name for each role.
DISPLAY_NAME_FIELDS: dict[str, str] = {
    "patient": "full_name",
    "doctor": "full_name",
    "hospital": "hospital_name",
    "pharmacy": "pharmacy_name",
    "insurance": "company_name",
    "admin": "admin_name",
}

# Human-readable portal labels for API responses and notifications.
ROLE_LABELS: dict[str, str] = {
    "patient": "Patient",
    "doctor": "Doctor",
    "hospital": "Hospital",
    "pharmacy": "Pharmacy",
    "insurance": "Insurance",
    "admin": "Admin",
}

APPROVED_MESSAGE = (
    "Your {role} registration has been approved! "
    "You can now log in to the {label} portal as {login_identifier}. "
    "Your password will be shared with you separately."
)
DECLINED_MESSAGE = (
    "Your {role} registration has been declined. "
    "Refund / further steps will be notified. Reason: {reason}"
)

# Id candidates tried when concurrent submissions race for the same millisecond.
REGISTRATION_ID_ATTEMPTS = 5
