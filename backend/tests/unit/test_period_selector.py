import pytest
from unittest.mock import AsyncMock

from orgcms.domain.activity import ActivityRecorder
from orgcms.domain.errors import NotFoundError
from orgcms.domain.org import PeriodSelector
from orgcms.infra import where
from orgcms.infra.records import ACTIVITY_LOGS, PERIODS


@pytest.mark.asyncio
async def test_resolves_the_single_active_period(memory_store):
	await memory_store.seed(
		PERIODS,
		[
			{"id": "p-2022", "name": "2022-2023", "isActive": False},
			{"id": "p-2023", "name": "2023-2024", "isActive": True},
		],
	)

	period = await PeriodSelector().resolve_active_period()

	assert period.id == "p-2023"
	assert period.is_active is True


@pytest.mark.asyncio
async def test_no_active_period_raises_not_found(memory_store):
	await memory_store.seed(PERIODS, [{"id": "p-2022", "isActive": False}])

	with pytest.raises(NotFoundError) as excinfo:
		await PeriodSelector().resolve_active_period()

	assert excinfo.value.code == "no_active_period"


@pytest.mark.asyncio
async def test_several_active_periods_return_the_first_stored(memory_store):
	await memory_store.seed(
		PERIODS,
		[
			{"id": "first", "isActive": True},
			{"id": "second", "isActive": True},
		],
	)

	period = await PeriodSelector().resolve_active_period()

	assert period.id == "first"


@pytest.mark.asyncio
async def test_explicit_period_id_skips_the_store():
	store = AsyncMock()
	selector = PeriodSelector(store=store)

	assert await selector.resolve("p-2019") == "p-2019"
	store.find.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_without_id_uses_active_period(memory_store):
	await memory_store.seed(PERIODS, [{"id": "p-2023", "isActive": True}])

	assert await PeriodSelector().resolve(None) == "p-2023"


@pytest.mark.asyncio
async def test_list_periods_newest_first(memory_store):
	await memory_store.seed(
		PERIODS,
		[
			{"id": "old", "startDate": "2021-01-01"},
			{"id": "new", "startDate": "2024-01-01"},
			{"id": "mid", "startDate": "2023-01-01"},
		],
	)

	periods = await PeriodSelector().list_periods()

	assert [period.id for period in periods] == ["new", "mid", "old"]


@pytest.mark.asyncio
async def test_activate_period_leaves_exactly_one_active(memory_store):
	await memory_store.seed(
		PERIODS,
		[
			{"id": "a", "isActive": True},
			{"id": "b", "isActive": True},
			{"id": "c", "isActive": False},
		],
	)
	recorder = ActivityRecorder()
	selector = PeriodSelector(recorder=recorder)

	period = await selector.activate_period("c", actor_id="admin-1", ip_address="10.0.0.1")
	await recorder.drain()

	assert period.id == "c"
	assert period.is_active is True
	active = await memory_store.find(PERIODS, where=where.equals("isActive", True))
	assert [doc["id"] for doc in active.docs] == ["c"]
	logs = await memory_store.find(ACTIVITY_LOGS)
	assert logs.total_docs == 1
	entry = logs.docs[0]
	assert entry["action"] == "update"
	assert entry["user"] == "admin-1"
	assert entry["documentId"] == "c"
	assert entry["ipAddress"] == "10.0.0.1"


@pytest.mark.asyncio
async def test_activate_unknown_period_changes_nothing(memory_store):
	await memory_store.seed(PERIODS, [{"id": "a", "isActive": True}])

	with pytest.raises(NotFoundError):
		await PeriodSelector().activate_period("missing", actor_id="admin-1")

	active = await memory_store.find(PERIODS, where=where.equals("isActive", True))
	assert [doc["id"] for doc in active.docs] == ["a"]
