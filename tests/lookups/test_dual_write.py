"""
Dual-write coordinator tests - saga outcomes and compensations across both stores
"""

import pytest

from config import settings
from config.lookups import COUNTRY
from services.dual_write import DualWriteCoordinator, ROLLBACK_FAILED_MESSAGE
from utils.errors import SagaOutcome, TransactionFailureError

WAKANDA = {"name": "Wakanda", "countryCode": "WK", "countryFlag": "wk.png"}


@pytest.fixture
def coordinator(primary_store, search_index, publisher):
    return DualWriteCoordinator(primary_store, search_index, publisher)


def stored(primary_store, record_id):
    return primary_store.rows(COUNTRY.table).get(record_id)


def indexed(search_index, record_id):
    return search_index.docs(COUNTRY.index).get(record_id)


async def create_wakanda(primary_store, search_index):
    record = dict(WAKANDA, id="11111111-1111-4111-8111-111111111111", isDeleted=False)
    primary_store.rows(COUNTRY.table)[record["id"]] = dict(record)
    search_index.docs(COUNTRY.index)[record["id"]] = dict(record)
    return record


class TestCreateSaga:

    @pytest.mark.asyncio
    async def test_success_writes_both_stores(self, coordinator, primary_store, search_index, publisher):
        created = await coordinator.create(COUNTRY, WAKANDA)

        assert "isDeleted" not in created
        assert created["name"] == "Wakanda"
        assert stored(primary_store, created["id"])["isDeleted"] is False
        assert indexed(search_index, created["id"]) == stored(primary_store, created["id"])
        assert publisher.topics() == [settings.LOOKUP_CREATE_TOPIC]
        assert publisher.events[0]["payload"]["resource"] == "country"

    @pytest.mark.asyncio
    async def test_index_failure_writes_nothing(self, coordinator, primary_store, search_index, publisher):
        search_index.fail("create")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.create(COUNTRY, WAKANDA)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert primary_store.rows(COUNTRY.table) == {}
        assert "create" not in primary_store.calls
        assert publisher.events == []
        assert publisher.errors[0]["apiAction"] == "country.create"

    @pytest.mark.asyncio
    async def test_store_failure_removes_index_document(self, coordinator, primary_store, search_index, publisher):
        primary_store.fail("create")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.create(COUNTRY, WAKANDA)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert search_index.docs(COUNTRY.index) == {}
        assert search_index.calls == ["create", "delete"]
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_failed_rollback_is_uncompensated(self, coordinator, primary_store, search_index, publisher):
        primary_store.fail("create")
        search_index.fail("delete")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.create(COUNTRY, WAKANDA)

        assert exc_info.value.outcome == SagaOutcome.UNCOMPENSATED_FAILURE
        assert exc_info.value.message == ROLLBACK_FAILED_MESSAGE
        assert exc_info.value.rollback_error is not None
        assert len(search_index.docs(COUNTRY.index)) == 1
        assert publisher.events == []


class TestUpdateSaga:

    @pytest.mark.asyncio
    async def test_success_publishes_changed_fields(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)

        updated = await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert updated["countryCode"] == "WA"
        assert "isDeleted" not in updated
        assert stored(primary_store, original["id"])["countryCode"] == "WA"
        assert indexed(search_index, original["id"])["countryCode"] == "WA"
        assert publisher.events == [{
            "topic": settings.LOOKUP_UPDATE_TOPIC,
            "payload": {"countryCode": "WA", "resource": "country", "id": original["id"]},
        }]

    @pytest.mark.asyncio
    async def test_store_failure_restores_index(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("update")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.update(COUNTRY, original, {"name": "Wakanda Forever"})

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert indexed(search_index, original["id"]) == original
        assert stored(primary_store, original["id"]) == original
        assert publisher.errors[0]["apiAction"] == "country.update"

    @pytest.mark.asyncio
    async def test_missing_index_document_is_reindexed(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        search_index.docs(COUNTRY.index).clear()

        await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert indexed(search_index, original["id"]) == dict(original, countryCode="WA")

    @pytest.mark.asyncio
    async def test_index_failure_leaves_store_untouched(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)
        search_index.fail("update")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert "update" not in primary_store.calls
        assert stored(primary_store, original["id"]) == original
        assert publisher.errors[0]["apiAction"] == "country.update"
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_reindex_failure_leaves_store_untouched(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)
        search_index.docs(COUNTRY.index).clear()
        search_index.fail("create")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert "update" not in primary_store.calls
        assert search_index.docs(COUNTRY.index) == {}
        assert publisher.errors[0]["apiAction"] == "country.update"

    @pytest.mark.asyncio
    async def test_failed_index_restore_is_uncompensated(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("update")
        search_index.fail("update", after=1)

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert exc_info.value.outcome == SagaOutcome.UNCOMPENSATED_FAILURE
        assert exc_info.value.message == ROLLBACK_FAILED_MESSAGE
        assert indexed(search_index, original["id"])["countryCode"] == "WA"
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_reindexed_document_removed_on_store_failure(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        search_index.docs(COUNTRY.index).clear()
        primary_store.fail("update")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.update(COUNTRY, original, {"countryCode": "WA"})

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert search_index.docs(COUNTRY.index) == {}



class TestRemoveSaga:

    @pytest.mark.asyncio
    async def test_soft_delete_flags_both_stores(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)

        await coordinator.remove(COUNTRY, original, destroy=False)

        assert stored(primary_store, original["id"])["isDeleted"] is True
        assert indexed(search_index, original["id"])["isDeleted"] is True
        assert publisher.events[0]["payload"] == {"resource": "country", "id": original["id"], "isSoftDelete": True}

    @pytest.mark.asyncio
    async def test_destroy_removes_from_both_stores(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)

        await coordinator.remove(COUNTRY, original, destroy=True)

        assert stored(primary_store, original["id"]) is None
        assert indexed(search_index, original["id"]) is None
        assert publisher.events[0]["payload"]["isSoftDelete"] is False

    @pytest.mark.asyncio
    async def test_destroy_with_missing_index_document(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        search_index.docs(COUNTRY.index).clear()

        await coordinator.remove(COUNTRY, original, destroy=True)

        assert stored(primary_store, original["id"]) is None

    @pytest.mark.asyncio
    async def test_soft_delete_store_failure_clears_index_flag(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("update")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=False)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert indexed(search_index, original["id"])["isDeleted"] is False

    @pytest.mark.asyncio
    async def test_destroy_store_failure_restores_index_document(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("delete")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=True)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert indexed(search_index, original["id"]) == original
        assert stored(primary_store, original["id"]) == original

    @pytest.mark.asyncio
    @pytest.mark.parametrize("destroy,index_operation", [(True, "delete"), (False, "update")])
    async def test_index_failure_leaves_store_untouched(self, coordinator, primary_store, search_index, publisher,
                                                        destroy, index_operation):
        original = await create_wakanda(primary_store, search_index)
        search_index.fail(index_operation)

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=destroy)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert "delete" not in primary_store.calls
        assert "update" not in primary_store.calls
        assert stored(primary_store, original["id"]) == original
        assert indexed(search_index, original["id"]) == original
        assert publisher.errors[0]["apiAction"] == "country.delete"
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_failed_flag_reset_is_uncompensated(self, coordinator, primary_store, search_index, publisher):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("update")
        search_index.fail("update", after=1)

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=False)

        assert exc_info.value.outcome == SagaOutcome.UNCOMPENSATED_FAILURE
        assert exc_info.value.message == ROLLBACK_FAILED_MESSAGE
        assert indexed(search_index, original["id"])["isDeleted"] is True
        assert stored(primary_store, original["id"])["isDeleted"] is False
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_failed_document_restore_is_uncompensated(self, coordinator, primary_store, search_index):
        original = await create_wakanda(primary_store, search_index)
        primary_store.fail("delete")
        search_index.fail("create")

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=True)

        assert exc_info.value.outcome == SagaOutcome.UNCOMPENSATED_FAILURE
        assert indexed(search_index, original["id"]) is None
        assert stored(primary_store, original["id"]) == original

    @pytest.mark.asyncio
    @pytest.mark.parametrize("destroy,store_operation", [(True, "delete"), (False, "update")])
    async def test_missing_index_document_stays_missing_on_store_failure(self, coordinator, primary_store,
                                                                          search_index, destroy, store_operation):
        original = await create_wakanda(primary_store, search_index)
        search_index.docs(COUNTRY.index).clear()
        primary_store.fail(store_operation)

        with pytest.raises(TransactionFailureError) as exc_info:
            await coordinator.remove(COUNTRY, original, destroy=destroy)

        assert exc_info.value.outcome == SagaOutcome.COMPENSATED_FAILURE
        assert search_index.docs(COUNTRY.index) == {}
        assert stored(primary_store, original["id"]) == original
