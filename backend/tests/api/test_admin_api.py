import pytest
from httpx import AsyncClient

from orgcms.domain.activity import recorder
from orgcms.infra import where
from orgcms.infra.records import ACTIVITY_LOGS, PERIODS

ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Roles": "admin"}


@pytest.mark.asyncio
async def test_activate_period_switches_active_period(api_client: AsyncClient, org_2023, memory_store):
	await memory_store.create(PERIODS, {"id": "p-2025", "name": "2025-2026", "isActive": False})

	response = await api_client.post("/api/admin/periods/p-2025/activate", headers=ADMIN_HEADERS)

	assert response.status_code == 200
	assert response.json()["data"]["id"] == "p-2025"
	assert response.json()["data"]["isActive"] is True
	active = await memory_store.find(PERIODS, where=where.equals("isActive", True))
	assert [doc["id"] for doc in active.docs] == ["p-2025"]

	current = await api_client.get("/api/public/period/active")
	assert current.json()["data"]["id"] == "p-2025"

	await recorder.drain()
	logs = await memory_store.find(ACTIVITY_LOGS)
	assert logs.total_docs == 1
	assert logs.docs[0]["user"] == "admin-1"
	assert logs.docs[0]["documentId"] == "p-2025"


@pytest.mark.asyncio
async def test_activate_requires_admin_role(api_client: AsyncClient, org_2023):
	anonymous = await api_client.post("/api/admin/periods/p-2023/activate")
	assert anonymous.status_code == 401
	assert anonymous.json()["error"]["code"] == "invalid_token"

	editor = await api_client.post(
		"/api/admin/periods/p-2023/activate",
		headers={"X-User-Id": "editor-1", "X-User-Roles": "editor"},
	)
	assert editor.status_code == 403
	assert editor.json()["error"]["code"] == "insufficient_role"


@pytest.mark.asyncio
async def test_activate_unknown_period(api_client: AsyncClient, org_2023):
	response = await api_client.post("/api/admin/periods/p-1900/activate", headers=ADMIN_HEADERS)

	assert response.status_code == 404
	assert response.json()["error"]["code"] == "period_not_found"
