"""
Tests for the admission gate: strategy selection, the Redis gate's
fail-open behaviour, and the ledger releasing units back to the gate.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from bookmyseat.core.config import Settings
from bookmyseat.services.admission_service import RedisAdmission, availability_key
from bookmyseat.services.interfaces.optimistic_admission import OptimisticAdmission
from bookmyseat.services.strategy_factory import build_admission_strategy


def _redis_admission(admit_result=1, admit_error=None):
    client = MagicMock()
    admit_script = AsyncMock(return_value=admit_result, side_effect=admit_error)
    release_script = AsyncMock(return_value=1)
    client.register_script.side_effect = [admit_script, release_script]
    client.set = AsyncMock()
    client.aclose = AsyncMock()
    return RedisAdmission(client), client, admit_script, release_script


def test_default_strategy_is_optimistic():
    assert isinstance(build_admission_strategy(Settings()), OptimisticAdmission)


def test_redis_strategy_selected_by_setting():
    strategy = build_admission_strategy(Settings(ADMISSION_STRATEGY="redis"))
    assert isinstance(strategy, RedisAdmission)


@pytest.mark.asyncio
async def test_optimistic_admits_everything():
    gate = OptimisticAdmission()
    assert await gate.admit("t1", 1000)
    await gate.release("t1", 3)
    await gate.sync("t1", 0)


@pytest.mark.asyncio
@pytest.mark.parametrize("script_result,admitted", [(1, True), (-1, True), (0, False)])
async def test_redis_admit_maps_script_result(script_result, admitted):
    gate, _, admit_script, _ = _redis_admission(admit_result=script_result)
    assert await gate.admit("t1", 2) is admitted
    admit_script.assert_awaited_once_with(keys=[availability_key("t1")], args=[2])


@pytest.mark.asyncio
async def test_redis_admit_fails_open():
    gate, _, _, _ = _redis_admission(admit_error=RedisConnectionError("down"))
    assert await gate.admit("t1", 1) is True


@pytest.mark.asyncio
async def test_redis_release_and_sync():
    gate, client, _, release_script = _redis_admission()
    await gate.release("t1", 3)
    release_script.assert_awaited_once_with(keys=["tickets:available:t1"], args=[3])

    await gate.sync("t1", 7)
    client.set.assert_awaited_once_with("tickets:available:t1", 7)

    await gate.close()
    client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_cancellation_releases_units_to_gate(in_ledger, approved_ticket):
    gate, _, _, release_script = _redis_admission()
    booking = await in_ledger(lambda l: l.reserve(approved_ticket.id, 2, "a@x.com"), admission=gate)
    await in_ledger(lambda l: l.cancel(booking.id), admission=gate)
    release_script.assert_awaited_once_with(keys=[availability_key(approved_ticket.id)], args=[2])


@pytest.mark.asyncio
async def test_ticket_approval_syncs_gate(in_catalog, make_ticket):
    from bookmyseat.domain.state_machine import TicketStatus

    gate, client, _, _ = _redis_admission()
    ticket = await make_ticket(quantity=9, status=TicketStatus.PENDING)
    await in_catalog(lambda c: c.set_ticket_status(ticket.id, TicketStatus.APPROVED), admission=gate)
    client.set.assert_awaited_once_with(availability_key(ticket.id), 9)
