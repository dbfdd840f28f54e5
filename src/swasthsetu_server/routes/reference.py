"""Reference data endpoints: roles, specializations, hospitals, categories.

Read-only views of the YAML catalog that the registration forms offer as
choices.  No authentication; demo accounts are not exposed.
"""

from fastapi import APIRouter, Depends

from swasthsetu_db.models.enums import Role
from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.constants import ROLE_LABELS

from swasthsetu_server.dependencies import get_catalog

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/roles")
def list_roles() -> list[dict]:
    """Return every portal role with its display label."""
    return [{"id": role.value, "label": ROLE_LABELS[role.value]} for role in Role]


@router.get("/specializations")
def list_specializations(
    catalog: CatalogStore = Depends(get_catalog),
) -> list[str]:
    """Return the doctor specializations."""
    return [e.name for e in catalog.specializations]


@router.get("/hospitals")
def list_hospitals(
    catalog: CatalogStore = Depends(get_catalog),
) -> list[str]:
    """Return the hospitals a doctor may be affiliated with."""
    return [e.name for e in catalog.hospitals]


@router.get("/medicine-categories")
def list_medicine_categories(
    catalog: CatalogStore = Depends(get_catalog),
) -> list[str]:
    """Return the medicine categories a pharmacy may stock."""
    return [e.name for e in catalog.medicine_categories]
