import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from orgcms.domain.activity import recorder
from orgcms.infra import store as store_registry
from orgcms.infra.memory_store import MemoryRecordStore
from orgcms.infra.records import MEMBERS, PERIODS, POSITIONS
from orgcms.main import app
from orgcms.settings import settings


@pytest_asyncio.fixture(autouse=True)
async def memory_store():
	store = MemoryRecordStore()
	store_registry.set_store(store)
	try:
		yield store
	finally:
		await recorder.drain()
		store_registry.set_store(None)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Dev mode lets API tests authenticate with X-User-Id / X-User-Roles headers."""
	original_env = settings.environment
	settings.environment = "dev"
	try:
		yield
	finally:
		settings.environment = original_env


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


@pytest_asyncio.fixture
async def org_2023(memory_store):
	"""Period 2023-2024 with a chair, a secretary and one inactive member."""
	period = await memory_store.create(
		PERIODS,
		{"id": "p-2023", "name": "2023-2024", "startDate": "2023-01-01", "endDate": "2024-12-31", "isActive": True},
	)
	chair = await memory_store.create(
		POSITIONS, {"id": "pos-chair", "title": "Chair", "level": "ketua", "order": 0, "period": "p-2023"}
	)
	secretary = await memory_store.create(
		POSITIONS, {"id": "pos-sec", "title": "Secretary", "level": "sekretaris", "order": 1, "period": "p-2023"}
	)
	await memory_store.seed(
		MEMBERS,
		[
			{"id": "m-alice", "name": "Alice", "slug": "alice", "position": "pos-chair", "period": "p-2023", "isActive": True},
			{"id": "m-bob", "name": "Bob", "slug": "bob", "position": "pos-sec", "period": "p-2023", "isActive": True},
			{"id": "m-carol", "name": "Carol", "slug": "carol", "position": "pos-sec", "period": "p-2023", "isActive": False},
		],
	)
	return {"period": period, "chair": chair, "secretary": secretary}
