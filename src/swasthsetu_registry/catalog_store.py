"""CatalogStore: loads the YAML catalog into typed models.

The store is loaded once at startup and provides the reference lists the
registration forms offer plus the demo login table used by login resolution.

Usage::

    store = CatalogStore()          # defaults to the catalog/ shipped in the package
    store.load()

    store.is_specialization("Cardiologist")   # True
    store.get_demo_account("ADMIN@swasthsetu.com")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from swasthsetu_registry.models.catalog import CatalogEntry, DemoAccount

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent / "catalog"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class CatalogStore:
    """Loads all catalog YAML and provides typed lookup.

    Attributes populated after :meth:`load`:

        specializations: list[CatalogEntry]
        hospitals: list[CatalogEntry]
        medicine_categories: list[CatalogEntry]
        demo_accounts: dict[lowercase email, DemoAccount]
    """

    def __init__(self, catalog_dir: str | Path | None = None) -> None:
        self._base = Path(catalog_dir) if catalog_dir else DEFAULT_CATALOG_DIR

        self.specializations: list[CatalogEntry] = []
        self.hospitals: list[CatalogEntry] = []
        self.medicine_categories: list[CatalogEntry] = []
        self.demo_accounts: dict[str, DemoAccount] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse every catalog file.  Raises ``FileNotFoundError`` if one is missing."""
        self.specializations = self._load_entries("specializations.yaml")
        self.hospitals = self._load_entries("hospitals.yaml")
        self.medicine_categories = self._load_entries("medicine_categories.yaml")

        self.demo_accounts = {}
        for raw in load_yaml(self._base / "demo_accounts.yaml"):
            account = DemoAccount(**raw)
            key = account.email.lower()
            if key in self.demo_accounts:
                raise ValueError(f"Duplicate demo account: {account.email}")
            self.demo_accounts[key] = account

        logger.info(
            "CatalogStore loaded: %d specializations, %d hospitals, "
            "%d medicine categories, %d demo accounts",
            len(self.specializations),
            len(self.hospitals),
            len(self.medicine_categories),
            len(self.demo_accounts),
        )

    def _load_entries(self, filename: str) -> list[CatalogEntry]:
        return [CatalogEntry(**raw) for raw in load_yaml(self._base / filename)]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def is_specialization(self, name: str) -> bool:
        return any(e.name == name for e in self.specializations)

    def is_hospital(self, name: str) -> bool:
        return any(e.name == name for e in self.hospitals)

    def is_medicine_category(self, name: str) -> bool:
        return any(e.name == name for e in self.medicine_categories)

    def get_demo_account(self, email: str) -> DemoAccount | None:
        """Case-insensitive demo account lookup."""
        return self.demo_accounts.get(email.strip().lower())
