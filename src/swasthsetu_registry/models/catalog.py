"""Pydantic models for the YAML catalog shipped with the SDK.

These models mirror the files in ``swasthsetu_registry/catalog/``:
  - DemoAccount: hard-coded demo login (demo_accounts.yaml)
  - CatalogEntry: a named option offered by a registration form
    (specializations.yaml, hospitals.yaml, medicine_categories.yaml)
"""

from typing import Literal

from pydantic import BaseModel


class DemoAccount(BaseModel):
    """A built-in demo login checked before issued credentials."""

    email: str
    password: str
    role: Literal["patient", "doctor", "hospital", "pharmacy", "insurance", "admin"]
    name: str
    # Legacy accounts are kept for old bookmarks but not advertised
    legacy: bool = False


class CatalogEntry(BaseModel):
    """Selectable option in a registration form."""

    name: str
