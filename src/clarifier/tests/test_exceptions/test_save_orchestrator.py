"""
Save orchestrator tests.

The orchestrator is exercised with plain coroutine functions as the persist step and
hand-built snapshots, so every failure path can be triggered without a database.
"""

import asyncio
import logging
from datetime import datetime

import pytest
from sqlalchemy import exc as sa_exc

from clarifier.core.logging.filters import get_error_code
from clarifier.exceptions.base import SaveChangesError
from clarifier.exceptions.failures import (
    EntityValidationError,
    EntityValidationGroup,
    FailureKind,
    FieldValidationError,
)
from clarifier.exceptions.mapper import raise_clarified_error, save_with_clarified_errors
from clarifier.tracking.snapshots import EntityState

OUT_OF_RANGE = "Parameter value '16.9166666667' is out of range."
LOGGER_NAME = "clarifier.tests.orchestrator"


def failing_with(exc: BaseException):
    async def persist():
        raise exc
    return persist


def no_snapshots():
    return []


@pytest.fixture
def log():
    return logging.getLogger(LOGGER_NAME)


def records_of(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == LOGGER_NAME]


@pytest.mark.asyncio
class TestSaveWithClarifiedErrors:

    async def test_success_logs_nothing_and_skips_snapshots(self, caplog, log, fixed_clock):
        calls = []

        async def persist():
            calls.append("persist")

        def provider():
            calls.append("snapshots")
            return []

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            await save_with_clarified_errors(persist, provider, log, clock=fixed_clock)

        assert calls == ["persist"]
        assert records_of(caplog) == []

    async def test_validation_failure_is_clarified(self, caplog, log, fixed_clock, shipped_reference_group):
        original = EntityValidationError([shipped_reference_group])

        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            with pytest.raises(SaveChangesError) as excinfo:
                await save_with_clarified_errors(failing_with(original), no_snapshots, log, clock=fixed_clock)

        expected = (
            "Error code 2025-11-02T22:09:44.047.\n"
            "The field code 'ShippedReference ◙ V94SDR' with value '123456789' "
            "should be text with a maximum length of '8'."
        )
        err = excinfo.value
        assert str(err) == expected
        assert err.clarified is True
        assert err.kind is FailureKind.VALIDATION
        assert err.error_code == "2025-11-02T22:09:44.047"
        assert err.__cause__ is original

        records = records_of(caplog)
        assert [r.levelno for r in records] == [logging.ERROR, logging.ERROR]
        assert records[0].getMessage() == "Error code 2025-11-02T22:09:44.047. Cannot validate the data."
        assert records[1].getMessage() == expected
        assert records[1].exc_info[1] is original
        assert all(r.error_code == "2025-11-02T22:09:44.047" for r in records)

    async def test_untranslatable_validation_failure_gets_basic_message(self, caplog, log, fixed_clock, make_snapshot):
        group = EntityValidationGroup(
            entry=make_snapshot({"ShippedReferencevvvV94SDR": None}),
            errors=(FieldValidationError("ShippedReferencevvvV94SDR", "The ShippedReferencevvvV94SDR field is required."),),
        )

        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            with pytest.raises(SaveChangesError) as excinfo:
                await save_with_clarified_errors(
                    failing_with(EntityValidationError([group])), no_snapshots, log, clock=fixed_clock
                )

        assert str(excinfo.value) == "Error code 2025-11-02T22:09:44.047. Cannot validate the data."
        assert excinfo.value.clarified is False
        assert len(records_of(caplog)) == 1

    async def test_update_failure_is_clarified_from_snapshots(self, caplog, log, fixed_clock, make_snapshot):
        original = sa_exc.StatementError("bind failed", "UPDATE shipments ...", {}, ValueError(OUT_OF_RANGE))
        entry = make_snapshot(
            {"id": 1, "CubicMeasurementvvvV93CUB": 16.9166666667, "CartonCountvvvV74CTNS": 10},
            state=EntityState.MODIFIED,
            modified={"CubicMeasurementvvvV93CUB"},
        )

        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            with pytest.raises(SaveChangesError) as excinfo:
                await save_with_clarified_errors(failing_with(original), lambda: [entry], log, clock=fixed_clock)

        assert str(excinfo.value) == (
            "Error code 2025-11-02T22:09:44.047 ◙ CubicMeasurement ◙ V93CUB. " + OUT_OF_RANGE
        )
        assert excinfo.value.kind is FailureKind.UPDATE
        assert excinfo.value.__cause__ is original
        assert [r.getMessage() for r in records_of(caplog)][0] == (
            "Error code 2025-11-02T22:09:44.047. Cannot update the data."
        )

    async def test_unmatched_update_failure_gets_basic_message(self, caplog, log, fixed_clock, make_snapshot):
        original = sa_exc.IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: shipments.id"))

        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            with pytest.raises(SaveChangesError) as excinfo:
                await save_with_clarified_errors(
                    failing_with(original), lambda: [make_snapshot({"id": 1})], log, clock=fixed_clock
                )

        assert str(excinfo.value) == "Error code 2025-11-02T22:09:44.047. Cannot update the data."
        assert excinfo.value.__cause__ is original
        assert len(records_of(caplog)) == 1

    async def test_other_failures_propagate_untouched(self, caplog, log, fixed_clock):
        original = RuntimeError("connection reset")

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            with pytest.raises(RuntimeError) as excinfo:
                await save_with_clarified_errors(failing_with(original), no_snapshots, log, clock=fixed_clock)

        assert excinfo.value is original
        assert records_of(caplog) == []

    async def test_cancellation_propagates_untouched(self, caplog, log, fixed_clock):
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            with pytest.raises(asyncio.CancelledError):
                await save_with_clarified_errors(
                    failing_with(asyncio.CancelledError()), no_snapshots, log, clock=fixed_clock
                )

        assert records_of(caplog) == []

    async def test_error_code_context_is_reset_afterwards(self, log, fixed_clock, shipped_reference_group):
        with pytest.raises(SaveChangesError):
            await save_with_clarified_errors(
                failing_with(EntityValidationError([shipped_reference_group])), no_snapshots, log, clock=fixed_clock
            )

        assert get_error_code() is None

    async def test_each_failure_takes_its_own_error_code(self, log, shipped_reference_group):
        moments = iter([datetime(2024, 1, 1, 0, 0, 0, 1_000), datetime(2024, 1, 1, 0, 0, 0, 2_000)])
        codes = []
        for _ in range(2):
            with pytest.raises(SaveChangesError) as excinfo:
                await save_with_clarified_errors(
                    failing_with(EntityValidationError([shipped_reference_group])),
                    no_snapshots,
                    log,
                    clock=lambda: next(moments),
                )
            codes.append(excinfo.value.error_code)

        assert codes == ["2024-01-01T00:00:00.001", "2024-01-01T00:00:00.002"]


class TestRaiseClarifiedError:

    def test_always_raises_even_without_translation(self, log, make_snapshot):
        original = sa_exc.IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: shipments.id"))

        with pytest.raises(SaveChangesError) as excinfo:
            raise_clarified_error(original, FailureKind.UPDATE, lambda: [make_snapshot({"id": 1})], log, "ts")

        assert str(excinfo.value) == "Error code ts. Cannot update the data."
        assert excinfo.value.__cause__ is original
