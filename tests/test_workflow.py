"""Tests for RegistrationWorkflow: submission, review and notifications.

Verifies that:
  - Submissions start pending with a ``reg-<role>-<millis>`` id
  - Catalog choices are checked on submission
  - approve/decline move pending registrations to their terminal state,
    issue credentials and emit notifications
  - Unknown ids (or ids from another role's collection) are no-ops
  - Terminal registrations cannot be reviewed again
  - Login identifiers avoid collisions with both credential tables

Uses MockRepository from tests/helpers so no database is needed.
"""

import logging
import re
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from swasthsetu_registry.catalog_store import CatalogStore
from swasthsetu_registry.constants import REGISTRATION_ID_ATTEMPTS
from swasthsetu_registry.errors import (
    CredentialIssuanceError,
    RegistrationNotFoundError,
    RegistrationNotPendingError,
)
from swasthsetu_registry.models.catalog import DemoAccount
from swasthsetu_registry.models.forms import parse_registration_form
from swasthsetu_registry.workflow import RegistrationWorkflow

from helpers.mock_repository import MockRepository


class SequenceRng:
    """Returns suffixes from a fixed list; repeats the last one when exhausted."""

    def __init__(self, values):
        self._values = list(values)

    def randint(self, a, b):
        if len(self._values) > 1:
            return self._values.pop(0)
        return self._values[0]


class RacingRepository(MockRepository):
    """Another writer commits each chosen id just before our insert lands.

    The first ``races`` inserts store a competing row under the same id and
    raise ``IntegrityError``, as a unique-key violation would.
    """

    def __init__(self, races):
        super().__init__()
        self._races = races
        self.insert_attempts = []

    async def create_registration(self, db, *, registration_id, **kwargs):
        self.insert_attempts.append(registration_id)
        if self._races > 0:
            self._races -= 1
            await super().create_registration(
                db, registration_id=registration_id, **kwargs,
            )
        return await super().create_registration(
            db, registration_id=registration_id, **kwargs,
        )


async def _submit(workflow, mock_db, payload):
    return await workflow.submit_registration(mock_db, parse_registration_form(payload))


# =====================================================================
# Submission
# =====================================================================


class TestSubmission:

    @pytest.mark.asyncio
    async def test_new_registration_is_pending(self, workflow, mock_db, doctor_payload):
        info = await _submit(workflow, mock_db, doctor_payload)
        assert info.status == "pending"
        assert info.role == "doctor"
        assert info.display_name == "Asha Verma"
        assert info.decided_at is None
        assert info.login_identifier is None

    @pytest.mark.asyncio
    async def test_id_format(self, workflow, mock_db, hospital_payload):
        info = await _submit(workflow, mock_db, hospital_payload)
        assert re.fullmatch(r"reg-hospital-\d+", info.id), f"Unexpected id: {info.id}"

    @pytest.mark.asyncio
    async def test_rapid_submissions_get_distinct_ids(
        self, workflow, mock_db, admin_payload,
    ):
        ids = {(await _submit(workflow, mock_db, admin_payload)).id for _ in range(5)}
        assert len(ids) == 5, "Each submission must receive its own id"

    @pytest.mark.asyncio
    async def test_details_stored(self, workflow, mock_db, mock_repo, pharmacy_payload):
        info = await _submit(workflow, mock_db, pharmacy_payload)
        row = mock_repo._registrations[info.id]
        assert row.details["owner_name"] == "Meena Patel"
        assert "role" not in row.details

    @pytest.mark.asyncio
    async def test_unknown_specialization_rejected(
        self, workflow, mock_db, mock_repo, doctor_payload,
    ):
        with pytest.raises(ValueError, match="Unknown specialization"):
            await _submit(workflow, mock_db, {**doctor_payload, "specialization": "Astrologer"})
        assert not mock_repo._registrations, "Nothing should be stored"

    @pytest.mark.asyncio
    async def test_unknown_hospital_rejected(self, workflow, mock_db, doctor_payload):
        with pytest.raises(ValueError, match="Unknown hospital affiliation"):
            await _submit(
                workflow, mock_db,
                {**doctor_payload, "hospital_affiliation": "Nowhere General"},
            )

    @pytest.mark.asyncio
    async def test_unknown_medicine_category_rejected(
        self, workflow, mock_db, pharmacy_payload,
    ):
        payload = {**pharmacy_payload, "medicine_categories": ["Antibiotics", "Cosmetics"]}
        with pytest.raises(ValueError, match="Cosmetics"):
            await _submit(workflow, mock_db, payload)

    @pytest.mark.asyncio
    async def test_concurrent_id_conflict_retries(self, catalog, mock_db, admin_payload):
        repo = RacingRepository(races=1)
        workflow = RegistrationWorkflow(catalog)
        workflow._repo = repo

        info = await _submit(workflow, mock_db, admin_payload)

        taken, retried = repo.insert_attempts
        assert info.id == retried
        assert int(retried.rsplit("-", 1)[1]) == int(taken.rsplit("-", 1)[1]) + 1, (
            "Retry should move one millisecond past the id taken concurrently"
        )
        assert set(repo._registrations) == {taken, retried}

    @pytest.mark.asyncio
    async def test_concurrent_id_conflict_gives_up(self, catalog, mock_db, admin_payload):
        repo = RacingRepository(races=REGISTRATION_ID_ATTEMPTS)
        workflow = RegistrationWorkflow(catalog)
        workflow._repo = repo

        with pytest.raises(IntegrityError):
            await _submit(workflow, mock_db, admin_payload)
        assert len(repo.insert_attempts) == REGISTRATION_ID_ATTEMPTS
        assert len(set(repo.insert_attempts)) == REGISTRATION_ID_ATTEMPTS


# =====================================================================
# Queries
# =====================================================================


class TestQueries:

    @pytest.mark.asyncio
    async def test_get_registration(self, workflow, mock_db, patient_payload):
        info = await _submit(workflow, mock_db, patient_payload)
        fetched = await workflow.get_registration(mock_db, registration_id=info.id)
        assert fetched is not None
        assert fetched.id == info.id

    @pytest.mark.asyncio
    async def test_get_unknown_registration(self, workflow, mock_db):
        assert await workflow.get_registration(mock_db, registration_id="reg-x-1") is None

    @pytest.mark.asyncio
    async def test_list_pending_across_roles_newest_first(
        self, workflow, mock_db, patient_payload, doctor_payload, hospital_payload,
    ):
        first = await _submit(workflow, mock_db, patient_payload)
        second = await _submit(workflow, mock_db, doctor_payload)
        third = await _submit(workflow, mock_db, hospital_payload)
        await workflow.decline_registration(
            mock_db, registration_id=second.id, role="doctor", reason="Incomplete",
        )

        pending = await workflow.list_pending(mock_db)
        assert [p.id for p in pending] == [third.id, first.id]

    @pytest.mark.asyncio
    async def test_list_registrations_filters(
        self, workflow, mock_db, patient_payload, doctor_payload,
    ):
        await _submit(workflow, mock_db, patient_payload)
        doctor = await _submit(workflow, mock_db, doctor_payload)
        await workflow.approve_registration(mock_db, registration_id=doctor.id, role="doctor")

        doctors = await workflow.list_registrations(mock_db, role="doctor")
        assert [d.id for d in doctors] == [doctor.id]

        approved = await workflow.list_registrations(mock_db, status="approved")
        assert [a.id for a in approved] == [doctor.id]

        pending_doctors = await workflow.list_registrations(
            mock_db, role="doctor", status="pending",
        )
        assert pending_doctors == []

    @pytest.mark.asyncio
    async def test_list_registrations_unknown_role(self, workflow, mock_db):
        with pytest.raises(ValueError):
            await workflow.list_registrations(mock_db, role="superuser")


# =====================================================================
# Approval
# =====================================================================


class TestApproval:

    @pytest.mark.asyncio
    async def test_asha_verma_scenario(self, workflow, mock_db, mock_repo, doctor_payload):
        """Approving Asha Verma issues ashaverm####@swasthsetu.com and notifies her."""
        info = await _submit(workflow, mock_db, doctor_payload)
        issued = await workflow.approve_registration(
            mock_db, registration_id=info.id, role="doctor",
        )

        assert issued is not None
        assert re.fullmatch(r"ashaverm\d{4}@swasthsetu\.com", issued.login_identifier)
        assert issued.role == "doctor"
        assert issued.registration_id == info.id
        assert issued.secret, "Plaintext secret is returned to the approving admin"

        row = mock_repo._registrations[info.id]
        assert row.status == "approved"
        assert row.issued_login_identifier == issued.login_identifier
        assert row.decided_at is not None

        notes = await workflow.list_notifications(mock_db, registration_id=info.id)
        assert len(notes) == 1
        assert notes[0].kind == "approved"
        assert notes[0].read is False
        assert issued.login_identifier in notes[0].message
        assert issued.secret not in notes[0].message, "Secret must never be notified"

    @pytest.mark.asyncio
    async def test_credential_stored_hashed(
        self, workflow, mock_db, mock_repo, admin_payload,
    ):
        info = await _submit(workflow, mock_db, admin_payload)
        issued = await workflow.approve_registration(
            mock_db, registration_id=info.id, role="admin",
        )
        stored = mock_repo._credentials[issued.login_identifier]
        assert stored.secret_hash != issued.secret
        assert issued.secret not in stored.secret_hash
        assert stored.role == "admin"
        assert stored.display_name == "Priya Nair"

    @pytest.mark.asyncio
    async def test_approve_unknown_id_is_noop(self, workflow, mock_db, mock_repo, caplog):
        with caplog.at_level(logging.WARNING):
            result = await workflow.approve_registration(
                mock_db, registration_id="reg-doctor-0", role="doctor",
            )
        assert result is None
        assert not mock_repo._credentials
        assert not mock_repo._notifications
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_approve_in_wrong_collection_is_noop(
        self, workflow, mock_db, mock_repo, doctor_payload,
    ):
        """The id exists, but not in the patient collection."""
        info = await _submit(workflow, mock_db, doctor_payload)
        result = await workflow.approve_registration(
            mock_db, registration_id=info.id, role="patient",
        )
        assert result is None
        assert mock_repo._registrations[info.id].status == "pending"

    @pytest.mark.asyncio
    async def test_reapprove_rejected(self, workflow, mock_db, mock_repo, doctor_payload):
        info = await _submit(workflow, mock_db, doctor_payload)
        await workflow.approve_registration(mock_db, registration_id=info.id, role="doctor")

        with pytest.raises(RegistrationNotPendingError, match="not pending"):
            await workflow.approve_registration(
                mock_db, registration_id=info.id, role="doctor",
            )
        assert len(mock_repo._credentials) == 1, "No second credential is issued"
        assert len(mock_repo._notifications) == 1

    @pytest.mark.asyncio
    async def test_approve_after_decline_rejected(self, workflow, mock_db, doctor_payload):
        info = await _submit(workflow, mock_db, doctor_payload)
        await workflow.decline_registration(
            mock_db, registration_id=info.id, role="doctor", reason="License expired",
        )
        with pytest.raises(RegistrationNotPendingError, match="not pending"):
            await workflow.approve_registration(
                mock_db, registration_id=info.id, role="doctor",
            )

    @pytest.mark.asyncio
    async def test_same_name_gets_distinct_identifiers(
        self, workflow, mock_db, doctor_payload,
    ):
        first = await _submit(workflow, mock_db, doctor_payload)
        second = await _submit(workflow, mock_db, doctor_payload)
        a = await workflow.approve_registration(mock_db, registration_id=first.id, role="doctor")
        b = await workflow.approve_registration(mock_db, registration_id=second.id, role="doctor")
        assert a.login_identifier != b.login_identifier


class TestIdentifierCollisions:

    @pytest.mark.asyncio
    async def test_redraws_on_issued_collision(self, catalog, mock_db, doctor_payload):
        repo = MockRepository()
        workflow = RegistrationWorkflow(catalog, rng=SequenceRng([1111, 2222]))
        workflow._repo = repo
        await repo.create_credential(
            mock_db,
            login_identifier="ashaverm1111@swasthsetu.com",
            secret_hash="x",
            role="doctor",
            display_name="Asha Verma",
            registration_id="reg-doctor-1",
        )

        info = await _submit(workflow, mock_db, doctor_payload)
        issued = await workflow.approve_registration(
            mock_db, registration_id=info.id, role="doctor",
        )
        assert issued.login_identifier == "ashaverm2222@swasthsetu.com"

    @pytest.mark.asyncio
    async def test_redraws_on_demo_collision(self, mock_db, doctor_payload):
        store = CatalogStore()
        store.load()
        store.demo_accounts["ashaverm1111@swasthsetu.com"] = DemoAccount(
            email="ashaverm1111@swasthsetu.com",
            password="demo",
            role="doctor",
            name="Demo Asha",
        )
        workflow = RegistrationWorkflow(store, rng=SequenceRng([1111, 3333]))
        workflow._repo = MockRepository()

        info = await _submit(workflow, mock_db, doctor_payload)
        issued = await workflow.approve_registration(
            mock_db, registration_id=info.id, role="doctor",
        )
        assert issued.login_identifier == "ashaverm3333@swasthsetu.com"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, catalog, mock_db, doctor_payload):
        repo = MockRepository()
        workflow = RegistrationWorkflow(catalog, rng=SequenceRng([1111]))
        workflow._repo = repo
        await repo.create_credential(
            mock_db,
            login_identifier="ashaverm1111@swasthsetu.com",
            secret_hash="x",
            role="doctor",
            display_name="Asha Verma",
            registration_id="reg-doctor-1",
        )

        info = await _submit(workflow, mock_db, doctor_payload)
        with pytest.raises(CredentialIssuanceError, match="unique login identifier"):
            await workflow.approve_registration(
                mock_db, registration_id=info.id, role="doctor",
            )
        assert repo._registrations[info.id].status == "pending"


# =====================================================================
# Decline
# =====================================================================


class TestDecline:

    @pytest.mark.asyncio
    async def test_decline_records_reason(
        self, workflow, mock_db, mock_repo, pharmacy_payload,
    ):
        info = await _submit(workflow, mock_db, pharmacy_payload)
        declined = await workflow.decline_registration(
            mock_db, registration_id=info.id, role="pharmacy",
            reason="  Registration number could not be verified  ",
        )
        assert declined.status == "declined"
        assert declined.decline_reason == "Registration number could not be verified"
        assert declined.decided_at is not None
        assert not mock_repo._credentials, "Declines never issue credentials"

        notes = await workflow.list_notifications(mock_db, registration_id=info.id)
        assert len(notes) == 1
        assert notes[0].kind == "declined"
        assert notes[0].login_identifier is None
        assert "Registration number could not be verified" in notes[0].message
        assert "Refund / further steps will be notified" in notes[0].message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", ["", "   ", None])
    async def test_blank_reason_rejected(self, workflow, mock_db, pharmacy_payload, reason):
        info = await _submit(workflow, mock_db, pharmacy_payload)
        with pytest.raises(ValueError, match="reason is required"):
            await workflow.decline_registration(
                mock_db, registration_id=info.id, role="pharmacy", reason=reason,
            )

    @pytest.mark.asyncio
    async def test_decline_unknown_id_is_noop(self, workflow, mock_db, mock_repo):
        result = await workflow.decline_registration(
            mock_db, registration_id="reg-pharmacy-0", role="pharmacy", reason="x",
        )
        assert result is None
        assert not mock_repo._notifications

    @pytest.mark.asyncio
    async def test_redecline_rejected(self, workflow, mock_db, mock_repo, insurance_payload):
        info = await _submit(workflow, mock_db, insurance_payload)
        await workflow.decline_registration(
            mock_db, registration_id=info.id, role="insurance", reason="first",
        )
        with pytest.raises(RegistrationNotPendingError, match="not pending"):
            await workflow.decline_registration(
                mock_db, registration_id=info.id, role="insurance", reason="second",
            )
        assert mock_repo._registrations[info.id].decline_reason == "first"


# =====================================================================
# Notifications
# =====================================================================


class TestNotifications:

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, workflow, mock_db, mock_repo, admin_payload):
        info = await _submit(workflow, mock_db, admin_payload)
        await workflow.approve_registration(mock_db, registration_id=info.id, role="admin")
        note = (await workflow.list_notifications(mock_db, registration_id=info.id))[0]

        first = await workflow.mark_notification_read(mock_db, notification_id=note.id)
        read_at = mock_repo._notifications[note.id].read_at
        second = await workflow.mark_notification_read(mock_db, notification_id=note.id)

        assert first.read and second.read
        assert mock_repo._notifications[note.id].read_at == read_at

    @pytest.mark.asyncio
    async def test_unread_only_filter(
        self, workflow, mock_db, admin_payload, hospital_payload,
    ):
        a = await _submit(workflow, mock_db, admin_payload)
        h = await _submit(workflow, mock_db, hospital_payload)
        await workflow.approve_registration(mock_db, registration_id=a.id, role="admin")
        await workflow.decline_registration(
            mock_db, registration_id=h.id, role="hospital", reason="Duplicate",
        )
        admin_note = (await workflow.list_notifications(mock_db, role="admin"))[0]
        await workflow.mark_notification_read(mock_db, notification_id=admin_note.id)

        unread = await workflow.list_notifications(mock_db, unread_only=True)
        assert [n.registration_id for n in unread] == [h.id]

    @pytest.mark.asyncio
    async def test_mark_unknown_notification(self, workflow, mock_db):
        with pytest.raises(RegistrationNotFoundError, match="not found"):
            await workflow.mark_notification_read(mock_db, notification_id=uuid.uuid4())
