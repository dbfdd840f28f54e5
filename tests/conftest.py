import random
from unittest.mock import AsyncMock

import pytest

from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.workflow import RegistrationWorkflow

from helpers.mock_repository import MockRepository


@pytest.fixture(scope="session")
def catalog():
    """Load the shipped catalog once for the entire test session."""
    store = CatalogStore()
    store.load()
    return store


@pytest.fixture
def mock_repo():
    """Fresh MockRepository for each test."""
    return MockRepository()


@pytest.fixture
def workflow(catalog, mock_repo):
    """RegistrationWorkflow with a mocked repository and seeded suffixes."""
    wf = RegistrationWorkflow(catalog, rng=random.Random(42))
    wf._repo = mock_repo
    return wf


@pytest.fixture
def mock_db():
    """AsyncMock standing in for AsyncSession; flush/commit are no-ops."""
    return AsyncMock()


# Valid payloads, one per role, used across the test modules
@pytest.fixture
def patient_payload():
    return {
        "role": "patient",
        "full_name": "Ramesh Kumar",
        "age": 45,
        "gender": "Male",
        "village": "Dhanpur",
        "mobile": "9876543210",
        "email": "",
        "emergency_contact_name": "Sita Kumar",
        "emergency_contact_number": "9876500000",
        "has_family_insurance": True,
        "medical_history": "Hypertension",
    }


@pytest.fixture
def doctor_payload():
    return {
        "role": "doctor",
        "full_name": "Asha Verma",
        "license_number": "MCI-12345",
        "specialization": "Cardiologist",
        "years_of_experience": 8,
        "hospital_affiliation": "Rampur District Hospital",
        "mobile": "9123456780",
        "email": "asha.verma@example.com",
        "bio": "Interventional cardiology",
    }


@pytest.fixture
def hospital_payload():
    return {
        "role": "hospital",
        "hospital_name": "Dhanpur Community Hospital",
        "registration_id": "HOSP-001",
        "type": "Government",
        "address": "Main Road, Dhanpur",
        "number_of_beds": 50,
        "contact_person_name": "Anil Sharma",
        "contact_person_mobile": "8765432109",
        "email": "contact@dhanpurhospital.in",
    }


@pytest.fixture
def pharmacy_payload():
    return {
        "role": "pharmacy",
        "pharmacy_name": "Jan Aushadhi Kendra",
        "owner_name": "Meena Patel",
        "registration_number": "PH-7781",
        "address": "Market Street, Rampur",
        "mobile": "7654321098",
        "timings": "9am - 9pm",
        "medicine_categories": ["General Medicines", "Antibiotics"],
    }


@pytest.fixture
def insurance_payload():
    return {
        "role": "insurance",
        "company_name": "Gramin Suraksha",
        "type": "Company",
        "license_id": "IRDA-555",
        "contact_person_name": "Vikram Singh",
        "contact_person_mobile": "6543210987",
        "email": "claims@graminsuraksha.in",
    }


@pytest.fixture
def admin_payload():
    return {
        "role": "admin",
        "admin_name": "Priya Nair",
        "organization_name": "District Health Office",
        "email": "priya.nair@example.org",
        "mobile": "9988776655",
    }
