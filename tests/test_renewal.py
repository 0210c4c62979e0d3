"""Tests for renewal processing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from benefitsengine.core.errors import (
    RateHistoryInvariantError,
    RecordNotFoundError,
    ValidationError,
)
from benefitsengine.core.models import Enrollment, EnrollmentRequest, RateHistoryEntry
from benefitsengine.core.types import CoverageSelection, PlanType, Relationship
from benefitsengine.engine.history import open_entry
from benefitsengine.engine.materializer import EnrollmentMaterializer
from benefitsengine.engine.renewal import RenewalProcessor
from benefitsengine.storage.repository import SQLiteRateStore


RENEWAL = date(2025, 1, 1)


def _enroll(store: SQLiteRateStore, today: date, **kwargs) -> list[str]:
    request = EnrollmentRequest(**{"effective_date": date(2024, 3, 1), **kwargs})
    created = EnrollmentMaterializer(store, today=today).materialize(request)
    return [e.id for e in created]


def _spans(store: SQLiteRateStore, enrollment_id: str) -> list[tuple]:
    return [
        (h.rate_id, h.start_date, h.end_date)
        for h in store.load_rate_history(enrollment_id)
    ]


class TestRenewalExample:
    def test_dollar_class_amount_after_renewal(
        self, composite_plan: str, store: SQLiteRateStore, today: date
    ) -> None:
        (eid,) = _enroll(store, today, participant_id="prt-lee", plan_id=composite_plan,
                         plan_option_id="opt-a", effective_date=date(2024, 1, 1))
        (before,) = store.load_rate_history(eid)
        assert (before.rate_amount, before.employer_amount) == (Decimal("100"), Decimal("0"))

        report = RenewalProcessor(store, today=today).process(RENEWAL, [composite_plan])

        assert report.ok
        assert report.succeeded == [eid]
        old, new = store.load_rate_history(eid)
        assert old.start_date == date(2024, 1, 1)
        assert old.end_date == date(2024, 12, 31)
        assert new.start_date == RENEWAL
        assert new.end_date is None
        assert new.rate_amount == Decimal("120")
        assert new.employer_amount == Decimal("20")
        assert new.employee_amount == Decimal("100")


class TestRenewal:
    @pytest.fixture
    def processor(self, sample_store: SQLiteRateStore, today: date) -> RenewalProcessor:
        return RenewalProcessor(sample_store, today=today)

    def test_renews_every_plan_type(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        family = _enroll(sample_store, today, participant_id="prt-rivera", plan_id="plan-acme-ppo",
                         coverage=CoverageSelection.EMPLOYEE_SPOUSE_CHILDREN)
        (hmo,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                         plan_option_id="opt-hmo-ee")
        (mapd,) = _enroll(sample_store, today, participant_id="prt-okafor", plan_id="plan-mapd-gold")

        report = processor.process(RENEWAL, ["plan-acme-ppo", "plan-acme-hmo", "plan-mapd-gold"])

        assert report.ok
        assert sorted(report.succeeded) == sorted([*family, hmo, mapd])
        assert _spans(sample_store, family[0]) == [
            ("rate-ppo-40-2024", date(2024, 3, 1), date(2024, 12, 31)),
            ("rate-ppo-40-2025", RENEWAL, None),
        ]
        assert _spans(sample_store, family[2])[-1] == ("rate-ppo-0-2025", RENEWAL, None)
        assert _spans(sample_store, mapd)[-1] == ("rate-mapd-2025", RENEWAL, None)

        hmo_entry = sample_store.load_rate_history(hmo)[-1]
        assert (hmo_entry.rate_amount, hmo_entry.employer_amount) == (
            Decimal("540.00"), Decimal("275"),
        )

    def test_rerun_is_idempotent(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        (eid,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                         plan_option_id="opt-hmo-ee")
        first = processor.process(RENEWAL, ["plan-acme-hmo"])
        second = processor.process(RENEWAL, ["plan-acme-hmo"])

        assert first.succeeded == [eid]
        assert second.succeeded == []
        assert second.unchanged == [eid]
        assert len(sample_store.load_rate_history(eid)) == 2

    def test_partial_failure_keeps_other_enrollments(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        option = sample_store.add_plan_option("plan-acme-hmo", "Legacy", option_id="opt-hmo-old")
        sample_store.add_rate("300", date(2024, 1, 1), option_id=option.id,
                              end_date=date(2024, 12, 31), rate_id="rate-hmo-old-2024")
        (ok,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                        plan_option_id="opt-hmo-ee")
        (stuck,) = _enroll(sample_store, today, participant_id="prt-rivera",
                           plan_id="plan-acme-hmo", plan_option_id="opt-hmo-old")

        report = processor.process(RENEWAL, ["plan-acme-hmo"])

        assert not report.ok
        assert report.succeeded == [ok]
        (failure,) = report.failed
        assert failure.enrollment_id == stuck
        assert failure.participant_id == "prt-rivera"
        assert "No active rate" in failure.reason
        # The stuck enrollment keeps its open entry
        assert _spans(sample_store, stuck) == [("rate-hmo-old-2024", date(2024, 3, 1), None)]

    def test_plan_batch_rolls_back_as_a_whole(
        self,
        processor: RenewalProcessor,
        sample_store: SQLiteRateStore,
        today: date,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        ids = [
            *_enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                     plan_option_id="opt-hmo-ee"),
            *_enroll(sample_store, today, participant_id="prt-rivera", plan_id="plan-acme-hmo",
                     plan_option_id="opt-hmo-ee"),
        ]
        append = sample_store.append_rate_history

        def append_then_fail(entries: list[RateHistoryEntry]) -> list[str]:
            append(entries[:1])
            raise RuntimeError("disk full")

        monkeypatch.setattr(sample_store, "append_rate_history", append_then_fail)
        with pytest.raises(RuntimeError, match="disk full"):
            processor.process(RENEWAL, ["plan-acme-hmo"])

        for eid in ids:
            assert _spans(sample_store, eid) == [("rate-hmo-ee-2024", date(2024, 3, 1), None)]

    def test_renews_composite_dependents_and_skips_terminated(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        (chen,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                          plan_option_id="opt-hmo-ee")
        sample_store.terminate_participant("prt-chen", date(2024, 12, 31))
        (primary,) = _enroll(sample_store, today, participant_id="prt-rivera",
                             plan_id="plan-acme-hmo", plan_option_id="opt-hmo-fam",
                             coverage=CoverageSelection.EMPLOYEE_SPOUSE_CHILDREN)
        materializer = EnrollmentMaterializer(sample_store, today=today)
        (rider,) = materializer.extend_for_dependent(
            sample_store.add_dependent(
                "prt-rivera", Relationship.CHILD, name="Rider", dob=date(2021, 1, 1)
            )
        )

        report = processor.process(RENEWAL, ["plan-acme-hmo"])

        assert report.succeeded == [primary, rider.id]
        assert _spans(sample_store, rider.id) == [
            ("rate-hmo-fam-2024", date(2024, 3, 1), date(2024, 12, 31)),
            ("rate-hmo-fam-2025", RENEWAL, None),
        ]
        assert _spans(sample_store, chen)[-1][2] is None

    def test_open_entry_after_renewal_date_fails(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        (eid,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                         plan_option_id="opt-hmo-ee")
        processor.process(date(2025, 3, 1), ["plan-acme-hmo"])

        report = processor.process(RENEWAL, ["plan-acme-hmo"])
        assert [f.enrollment_id for f in report.failed] == [eid]
        assert "after the renewal date" in report.failed[0].reason

    def test_unpriceable_other_plan(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        sample_store.add_plan("Wellness", PlanType.OTHER, group_id="grp-acme", plan_id="plan-well")
        (eid,) = sample_store.create_enrollments(
            [Enrollment(participant_id="prt-chen", plan_id="plan-well", effective_date=date(2024, 3, 1))]
        )

        report = processor.process(RENEWAL, ["plan-well"])
        assert [f.enrollment_id for f in report.failed] == [eid]
        assert "no plan option to price" in report.failed[0].reason

    def test_terminated_plan_is_skipped(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                plan_option_id="opt-hmo-ee")
        sample_store.terminate_plan("plan-acme-hmo", date(2024, 12, 31))

        report = processor.process(RENEWAL, ["plan-acme-hmo"])
        assert report.succeeded == report.unchanged == report.failed == []

    def test_unknown_plan_fails_before_writing(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        (eid,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                         plan_option_id="opt-hmo-ee")
        with pytest.raises(RecordNotFoundError):
            processor.process(RENEWAL, ["plan-acme-hmo", "plan-missing"])
        assert len(sample_store.load_rate_history(eid)) == 1

    def test_no_plans(self, processor: RenewalProcessor) -> None:
        with pytest.raises(ValidationError):
            processor.process(RENEWAL, [])

    def test_duplicate_plan_ids_renew_once(
        self, processor: RenewalProcessor, sample_store: SQLiteRateStore, today: date
    ) -> None:
        (eid,) = _enroll(sample_store, today, participant_id="prt-chen", plan_id="plan-acme-hmo",
                         plan_option_id="opt-hmo-ee")
        report = processor.process(RENEWAL, ["plan-acme-hmo", "plan-acme-hmo"])
        assert report.plan_ids == ["plan-acme-hmo"]
        assert report.succeeded == [eid]


def test_two_open_entries_is_fatal() -> None:
    entries = [
        RateHistoryEntry(
            id=f"h{i}", enrollment_id="e1", rate_id="r", start_date=date(2024, i, 1),
            rate_amount=Decimal("1"), employer_amount=Decimal("0"), employee_amount=Decimal("1"),
        )
        for i in (1, 2)
    ]
    with pytest.raises(RateHistoryInvariantError) as exc_info:
        open_entry(entries, "e1")
    assert exc_info.value.context["entries"] == ["h1", "h2"]


def test_open_entry_none_or_single() -> None:
    closed = RateHistoryEntry(
        id="h1", enrollment_id="e1", rate_id="r", start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31), rate_amount=Decimal("1"),
        employer_amount=Decimal("0"), employee_amount=Decimal("1"),
    )
    assert open_entry([closed], "e1") is None
    current = closed.model_copy(update={"id": "h2", "end_date": None})
    assert open_entry([closed, current], "e1") is current
