"""Credential issuer: login identifiers, secrets and secret hashing.

A login identifier is derived from the applicant's display name::

    "Asha Verma" -> "ashaverm" + 4-digit suffix + "@swasthsetu.com"

Secrets are random url-safe tokens.  Only a salted PBKDF2 hash is ever
stored; the plaintext is handed back to the approving admin once.
"""

from __future__ import annotations

import hashlib
import hmac
import random
import re
import secrets

from swasthsetu_registry.constants import (
    CREDENTIAL_EMAIL_DOMAIN,
    PBKDF2_ALGORITHM,
    PBKDF2_ITERATIONS,
    SANITIZED_NAME_LENGTH,
    SECRET_NBYTES,
    SUFFIX_MAX,
    SUFFIX_MIN,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")

_system_random = secrets.SystemRandom()


def sanitize_name(name: str) -> str:
    """Lowercase ``name``, drop everything outside ``[a-z0-9]``, keep 8 chars."""
    return _NON_ALNUM.sub("", name.lower())[:SANITIZED_NAME_LENGTH]


def draw_suffix(rng: random.Random | None = None) -> int:
    """Draw a four-digit numeric suffix."""
    return (rng or _system_random).randint(SUFFIX_MIN, SUFFIX_MAX)


def build_login_identifier(display_name: str, suffix: int) -> str:
    """Compose the lowercase login identifier for a display name and suffix."""
    return f"{sanitize_name(display_name)}{suffix}@{CREDENTIAL_EMAIL_DOMAIN}".lower()


def generate_secret() -> str:
    """Return a fresh random secret suitable for first login."""
    return secrets.token_urlsafe(SECRET_NBYTES)


# ----------------------------------------------------------------------
# Hashing
# ----------------------------------------------------------------------


def hash_secret(raw_secret: str, salt: bytes | None = None) -> str:
    """Hash ``raw_secret`` as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", raw_secret.encode("utf-8"), salt, PBKDF2_ITERATIONS
    )
    return f"{PBKDF2_ALGORITHM}${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_secret(raw_secret: str, stored: str) -> bool:
    """Check ``raw_secret`` against a hash produced by :func:`hash_secret`.

    Malformed stored values verify as ``False`` rather than raising.
    """
    try:
        algorithm, iterations, salt_hex, digest_hex = stored.split("$", 3)
        if algorithm != PBKDF2_ALGORITHM:
            return False
        rounds = int(iterations)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False
    actual = hashlib.pbkdf2_hmac("sha256", raw_secret.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(actual, expected)
