from __future__ import annotations

import pytest

from bagtag.services.delete_confirmation import (
    ConfirmOutcome,
    ConfirmState,
    DeleteConfirmation,
    DeleteConfirmationRegistry,
)
from tests.fakes import FakeClock

pytestmark = pytest.mark.unit


def test_first_request_arms_and_second_confirms():
    clock = FakeClock()
    machine = DeleteConfirmation(3.0, clock)

    assert machine.request() is ConfirmOutcome.ARMED
    assert machine.state() is ConfirmState.ARMED
    clock.advance(2.5)
    assert machine.request() is ConfirmOutcome.CONFIRMED
    assert machine.state() is ConfirmState.IDLE


def test_request_after_timeout_rearms():
    clock = FakeClock()
    machine = DeleteConfirmation(3.0, clock)

    machine.request()
    clock.advance(3.0)

    assert machine.state() is ConfirmState.IDLE
    assert machine.request() is ConfirmOutcome.ARMED
    assert machine.remaining() == 3.0


def test_disarm_returns_to_idle():
    clock = FakeClock()
    machine = DeleteConfirmation(3.0, clock)
    machine.request()

    machine.disarm()

    assert machine.request() is ConfirmOutcome.ARMED


def test_registry_keeps_records_and_users_apart():
    clock = FakeClock()
    registry = DeleteConfirmationRegistry(3.0, clock)

    assert registry.request("u1", "a") == (ConfirmOutcome.ARMED, 3.0)
    assert registry.request("u1", "b")[0] is ConfirmOutcome.ARMED
    assert registry.request("u2", "a")[0] is ConfirmOutcome.ARMED
    clock.advance(1.0)
    assert registry.request("u1", "a")[0] is ConfirmOutcome.CONFIRMED
    # a confirmed record starts over
    assert registry.request("u1", "a")[0] is ConfirmOutcome.ARMED


def test_registry_rearms_after_timeout():
    clock = FakeClock()
    registry = DeleteConfirmationRegistry(3.0, clock)

    registry.request("u1", "a")
    clock.advance(4.0)

    assert registry.request("u1", "a") == (ConfirmOutcome.ARMED, 3.0)
