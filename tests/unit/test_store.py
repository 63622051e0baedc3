"""
Tests for the in-memory host store and snapshot loading.
"""

import json
from datetime import datetime

import pytest

from ops_intent.domain import Address, Client, DomainSnapshot, Job, JobStatus, Property
from ops_intent.ports import StoreError, load_snapshot, new_id


def _client(client_id="c9"):
    address = Address(street="1 Elm", city="Lubbock", state="TX", zip="79401")
    return Client(
        id=client_id,
        first_name="Alice",
        last_name="Walker",
        billing_address=address,
        properties=[Property(id=f"prop-{client_id}", client_id=client_id, address=address)],
        created_at=datetime(2026, 6, 1),
    )


def _job(job_id="j9", client_id="c1"):
    return Job(
        id=job_id,
        client_id=client_id,
        property_id=f"prop-{client_id}",
        title="Wash",
        start=datetime(2026, 6, 2, 9),
        end=datetime(2026, 6, 2, 10),
    )


class TestMutations:

    def test_create_client_goes_first(self, store):
        store.create_client(_client())
        assert store.snapshot.clients[0].id == "c9"
        assert store.mutations[0].operation == "create_client"

    def test_duplicate_client(self, store):
        with pytest.raises(StoreError):
            store.create_client(_client("c1"))

    def test_create_job_assigns_sequence(self, store):
        store.create_job(_job())
        assert store.snapshot.job_by_id("j9").sequence == 7

    def test_create_job_unknown_client(self, store):
        with pytest.raises(StoreError):
            store.create_job(_job(client_id="nobody"))

    def test_cancel_job(self, store):
        store.cancel_job("j1", "weather")
        job = store.snapshot.job_by_id("j1")
        assert job.status == JobStatus.CANCELLED
        assert job.cancellation_reason == "weather"
        assert job.assigned_tech_ids == []

    @pytest.mark.parametrize("job_id", ["j4", "j6"])
    def test_cancel_terminal_job(self, store, job_id):
        with pytest.raises(StoreError):
            store.cancel_job(job_id, "again")

    def test_cancel_unknown_job(self, store):
        with pytest.raises(StoreError):
            store.cancel_job("missing", "reason")

    def test_assign_promotes_draft(self, store):
        job = store.snapshot.job_by_id("j1")
        job.status = JobStatus.DRAFT
        store.assign_technician("j1", "u2")
        assert job.assigned_tech_ids == ["u2"]
        assert job.status == JobStatus.SCHEDULED

    def test_assign_unknown_technician(self, store):
        with pytest.raises(StoreError):
            store.assign_technician("j1", "u404")

    def test_emit_reply(self, store):
        store.emit_reply("chat-1", "hello", "ai-bot")
        message = store.replies[0]
        assert (message.chat_id, message.content, message.sender_id) == ("chat-1", "hello", "ai-bot")

    def test_new_id_prefix(self):
        assert new_id("job").startswith("job-")
        assert new_id("job") != new_id("job")


class TestSnapshot:

    def test_latest_job_by_sequence(self, snapshot):
        assert snapshot.latest_job().id == "j6"

    def test_latest_job_empty(self):
        assert DomainSnapshot().latest_job() is None

    def test_stock_on_hand(self, snapshot):
        assert snapshot.stock_on_hand(snapshot.inventory_products[0]) == 3

    def test_job_window_validated(self):
        with pytest.raises(ValueError):
            Job(
                id="bad",
                client_id="c1",
                property_id="p",
                title="Backwards",
                start=datetime(2026, 6, 2, 10),
                end=datetime(2026, 6, 2, 9),
            )

    def test_client_needs_property(self):
        with pytest.raises(ValueError):
            Client(
                id="c0",
                first_name="No",
                billing_address=Address(street="x", city="y", state="TX", zip="1"),
                properties=[],
                created_at=datetime(2026, 1, 1),
            )


class TestLoadSnapshot:

    def test_missing_file(self, tmp_path):
        assert load_snapshot(str(tmp_path / "nope.json")).jobs == []

    def test_empty_path(self):
        assert load_snapshot("").clients == []

    def test_camel_case_and_file_order_sequence(self, tmp_path):
        address = {"street": "1 Elm", "city": "Lubbock", "state": "TX", "zip": "79401"}
        job = {
            "clientId": "c1",
            "propertyId": "p1",
            "assignedTechIds": ["u1"],
            "title": "Wash",
            "start": "2026-06-02T09:00:00",
            "end": "2026-06-02T10:00:00",
            "status": "SCHEDULED",
        }
        data = {
            "clients": [
                {
                    "id": "c1",
                    "firstName": "John",
                    "lastName": "Doe",
                    "billingAddress": address,
                    "properties": [{"id": "p1", "clientId": "c1", "address": address}],
                    "createdAt": "2025-01-01T00:00:00Z",
                }
            ],
            "jobs": [dict(job, id="job-b"), dict(job, id="job-a")],
            "users": [{"id": "u1", "name": "Marcus Johnson", "email": "m@example.com", "role": "TECHNICIAN"}],
        }
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(data))

        snapshot = load_snapshot(str(path))
        assert snapshot.clients[0].first_name == "John"
        assert snapshot.clients[0].created_at.tzinfo is None
        assert [j.sequence for j in snapshot.jobs] == [1, 2]
        assert snapshot.latest_job().id == "job-a"
        assert snapshot.jobs[0].assigned_tech_ids == ["u1"]
