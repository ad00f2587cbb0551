import asyncio
import base64
from pathlib import Path
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi import HTTPException
from httpx import AsyncClient

from app.config.config import settings
from app.schemas.complaint_schemas import AssignWorkerSchema, ComplaintStatusUpdate
from app.schemas.status_schema import ComplaintStatus
from app.services import complaint_service
from app.test.factories import ComplaintFactory, WorkerFactory


async def file_complaint(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = ComplaintFactory(**overrides).model_dump()
    response = await client.post("/api/complaints", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def first_worker_id(client: AsyncClient) -> str:
    response = await client.get("/api/workers")
    return response.json()[0]["id"]


class TestCreateComplaint:
    """Test complaint submission."""

    async def test_create_complaint(self, client: AsyncClient, citizen):
        complaint = await file_complaint(
            client, citizen["headers"], location="12 Market Street"
        )

        assert complaint["status"] == "pending"
        assert complaint["location"] == "12 Market Street"
        assert complaint["user_id"] == citizen["user"]["user_id"]
        assert complaint["assigned_worker_id"] is None
        assert complaint["image_url"] is None

    async def test_create_complaint_requires_auth(self, client: AsyncClient):
        payload = ComplaintFactory().model_dump()
        response = await client.post("/api/complaints", json=payload)
        assert response.status_code == 401

    async def test_create_complaint_missing_fields(self, client: AsyncClient, citizen):
        response = await client.post(
            "/api/complaints",
            json={"name": "Only a name"},
            headers=citizen["headers"],
        )
        assert response.status_code == 422

    async def test_photo_data_url_is_stored(self, client: AsyncClient, citizen):
        pixel = base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode()
        complaint = await file_complaint(
            client, citizen["headers"], photo=f"data:image/png;base64,{pixel}"
        )

        image_url = complaint["image_url"]
        assert image_url.startswith("/uploads/") and image_url.endswith(".png")
        stored = Path(settings.UPLOAD_DIR) / image_url.rsplit("/", 1)[-1]
        assert stored.read_bytes() == b"\x89PNG\r\n\x1a\nfake"

    async def test_photo_link_is_kept(self, client: AsyncClient, citizen):
        complaint = await file_complaint(
            client, citizen["headers"], photo="https://img.example.com/heap.jpg"
        )
        assert complaint["image_url"] == "https://img.example.com/heap.jpg"

    async def test_invalid_photo_rejected(self, client: AsyncClient, citizen):
        payload = ComplaintFactory(photo="not a picture").model_dump()
        response = await client.post(
            "/api/complaints", json=payload, headers=citizen["headers"]
        )
        assert response.status_code == 400


class TestListComplaints:
    """Test complaint visibility."""

    async def test_citizen_sees_own_newest_first(
        self, client: AsyncClient, citizen, other_citizen
    ):
        first = await file_complaint(client, citizen["headers"])
        second = await file_complaint(client, citizen["headers"])
        await file_complaint(client, other_citizen["headers"])

        response = await client.get("/api/complaints", headers=citizen["headers"])

        assert response.status_code == 200
        ids = [c["id"] for c in response.json()]
        assert ids == [second["id"], first["id"]]

    async def test_admin_sees_all(self, client: AsyncClient, citizen, other_citizen, admin):
        await file_complaint(client, citizen["headers"])
        await file_complaint(client, other_citizen["headers"])

        response = await client.get("/api/complaints", headers=admin["headers"])

        assert len(response.json()) == 2

    async def test_get_other_users_complaint_forbidden(
        self, client: AsyncClient, citizen, other_citizen
    ):
        complaint = await file_complaint(client, citizen["headers"])

        response = await client.get(
            f"/api/complaints/{complaint['id']}", headers=other_citizen["headers"]
        )
        assert response.status_code == 403

    async def test_get_missing_complaint(self, client: AsyncClient, citizen):
        response = await client.get(
            "/api/complaints/00000000-0000-0000-0000-000000000000",
            headers=citizen["headers"],
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Complaint not found"


class TestComplaintLifecycle:
    """Test assignment and completion."""

    async def test_assign_worker(self, client: AsyncClient, citizen, admin):
        complaint = await file_complaint(client, citizen["headers"])
        workers = (await client.get("/api/workers")).json()
        worker = workers[0]

        response = await client.put(
            f"/api/complaints/{complaint['id']}/assign",
            json={"worker_id": worker["id"]},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "assigned"
        assert data["assigned_worker_id"] == worker["id"]
        assert data["assigned_worker_name"] == worker["name"]
        assert data["assigned_worker_phone"] == worker["phone"]

    async def test_assign_requires_admin(self, client: AsyncClient, citizen):
        complaint = await file_complaint(client, citizen["headers"])
        worker_id = await first_worker_id(client)

        response = await client.put(
            f"/api/complaints/{complaint['id']}/assign",
            json={"worker_id": worker_id},
            headers=citizen["headers"],
        )
        assert response.status_code == 403

    async def test_assign_unknown_worker(self, client: AsyncClient, citizen, admin):
        complaint = await file_complaint(client, citizen["headers"])

        response = await client.put(
            f"/api/complaints/{complaint['id']}/assign",
            json={"worker_id": "00000000-0000-0000-0000-000000000000"},
            headers=admin["headers"],
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Worker not found"

    async def test_assign_twice_conflicts(self, client: AsyncClient, citizen, admin):
        complaint = await file_complaint(client, citizen["headers"])
        worker_id = await first_worker_id(client)
        url = f"/api/complaints/{complaint['id']}/assign"

        await client.put(url, json={"worker_id": worker_id}, headers=admin["headers"])
        response = await client.put(
            url, json={"worker_id": worker_id}, headers=admin["headers"]
        )
        assert response.status_code == 409

    async def test_complete_assigned_complaint(self, client: AsyncClient, citizen, admin):
        complaint = await file_complaint(client, citizen["headers"])
        worker_id = await first_worker_id(client)
        await client.put(
            f"/api/complaints/{complaint['id']}/assign",
            json={"worker_id": worker_id},
            headers=admin["headers"],
        )

        response = await client.put(
            f"/api/complaints/{complaint['id']}/status",
            json={"status": "completed"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["assigned_worker_id"] == worker_id

    @pytest.mark.parametrize(
        "target, expected",
        [("completed", 409), ("assigned", 400), ("pending", 409)],
    )
    async def test_invalid_transitions_from_pending(
        self, client: AsyncClient, citizen, admin, target, expected
    ):
        complaint = await file_complaint(client, citizen["headers"])

        response = await client.put(
            f"/api/complaints/{complaint['id']}/status",
            json={"status": target},
            headers=admin["headers"],
        )
        assert response.status_code == expected

    async def test_unknown_status_rejected(self, client: AsyncClient, citizen, admin):
        complaint = await file_complaint(client, citizen["headers"])

        response = await client.put(
            f"/api/complaints/{complaint['id']}/status",
            json={"status": "archived"},
            headers=admin["headers"],
        )
        assert response.status_code == 422

    async def test_assign_copies_worker_contact(
        self, client: AsyncClient, repository, citizen, admin
    ):
        worker = await repository.create_worker(
            WorkerFactory(name="Worker Zeta", phone="555-0100")
        )
        complaint = await file_complaint(client, citizen["headers"])

        assigned = await client.put(
            f"/api/complaints/{complaint['id']}/assign",
            json={"worker_id": str(worker.id)},
            headers=admin["headers"],
        )
        completed = await client.put(
            f"/api/complaints/{complaint['id']}/status",
            json={"status": "completed"},
            headers=admin["headers"],
        )

        assert assigned.json()["assigned_worker_phone"] == "555-0100"
        assert assigned.json()["assigned_worker_name"] == "Worker Zeta"
        assert completed.json()["status"] == "completed"
        assert completed.json()["assigned_worker_phone"] == "555-0100"


def hold_writes_until(callers: int, update_complaint):
    """Make ``callers`` concurrent updates all pass their reads before any writes."""
    arrived = []
    everyone_read = asyncio.Event()

    async def gated(*args, **kwargs):
        arrived.append(1)
        if len(arrived) == callers:
            everyone_read.set()
        await everyone_read.wait()
        return await update_complaint(*args, **kwargs)

    return gated


class TestConcurrentTransitions:
    """Racing admins must not both win a transition."""

    async def test_concurrent_assigns_one_wins(self, repository):
        complaint = await repository.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )
        first, second = (await repository.list_workers())[:2]

        with patch.object(
            repository,
            "update_complaint",
            hold_writes_until(2, repository.update_complaint),
        ):
            results = await asyncio.gather(
                complaint_service.assign_worker(
                    repository, complaint.id, AssignWorkerSchema(worker_id=first.id)
                ),
                complaint_service.assign_worker(
                    repository, complaint.id, AssignWorkerSchema(worker_id=second.id)
                ),
                return_exceptions=True,
            )

        winners = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, HTTPException)]
        assert len(winners) == 1
        assert len(conflicts) == 1
        assert conflicts[0].status_code == 409
        stored = await repository.get_complaint(complaint.id)
        assert stored.assigned_worker_id == winners[0].assigned_worker_id

    async def test_concurrent_status_updates_one_wins(self, repository):
        complaint = await repository.create_complaint(
            user_id=uuid4(), name="N", location="L", description="D", image_url=None
        )
        worker = (await repository.list_workers())[0]
        await complaint_service.assign_worker(
            repository, complaint.id, AssignWorkerSchema(worker_id=worker.id)
        )
        done = ComplaintStatusUpdate(status=ComplaintStatus.COMPLETED)

        with patch.object(
            repository,
            "update_complaint",
            hold_writes_until(2, repository.update_complaint),
        ):
            results = await asyncio.gather(
                complaint_service.update_complaint_status(repository, complaint.id, done),
                complaint_service.update_complaint_status(repository, complaint.id, done),
                return_exceptions=True,
            )

        assert sum(isinstance(r, HTTPException) and r.status_code == 409 for r in results) == 1
        assert (await repository.get_complaint(complaint.id)).status == ComplaintStatus.COMPLETED
