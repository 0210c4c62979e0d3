"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from benefitsengine.config.settings import DatabaseSettings, Settings
from benefitsengine.core.models import ContributionPolicy, Rate
from benefitsengine.core.types import ContributionType, PlanType
from benefitsengine.orchestrator.service import BenefitsService
from benefitsengine.storage.repository import SQLiteRateStore


if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


ENV_OVERRIDES = (
    "BENEFITS_DB_PATH",
    "BENEFITS_DB_TIMEOUT",
    "BENEFITS_MAX_CLASSES",
    "BENEFITS_MONEY_PLACES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of the tests."""
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def today() -> date:
    """Fixed reference day used for ages and display status."""
    return date(2025, 6, 1)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "benefits.db"


@pytest.fixture
def store(db_path: Path) -> SQLiteRateStore:
    """Empty rate store in a temporary database."""
    return SQLiteRateStore(db_path)


@pytest.fixture
def sample_store(store: SQLiteRateStore) -> SQLiteRateStore:
    """Rate store seeded with the demo book of business."""
    store.load_sample_data()
    return store


@pytest.fixture
def settings(db_path: Path) -> Settings:
    return Settings(database=DatabaseSettings(path=str(db_path)))


@pytest.fixture
def service(settings: Settings, sample_store: SQLiteRateStore, today: date) -> BenefitsService:
    """Service over the seeded store with a fixed reference day."""
    return BenefitsService(settings, store=sample_store, today=today)


@pytest.fixture
def composite_plan(store: SQLiteRateStore) -> str:
    """Composite plan with no plan-level policy and one option priced 2024 and 2025.

    The 2025 rate carries a $20 class-1 employer contribution.
    """
    store.create_group("Test Group", number_of_classes=2, group_id="grp-test")
    store.add_plan(
        "Test Composite", PlanType.COMPOSITE, group_id="grp-test",
        effective_date=date(2024, 1, 1), plan_id="plan-comp",
    )
    store.add_plan_option("plan-comp", "Employee Only", option_id="opt-a")
    store.add_rate("100", date(2024, 1, 1), option_id="opt-a", end_date=date(2024, 12, 31),
                   rate_id="rate-a-2024")
    store.add_rate(
        "120", date(2025, 1, 1), option_id="opt-a",
        contribution_type=ContributionType.DOLLAR, class_amounts={1: Decimal("20")},
        rate_id="rate-a-2025",
    )
    store.add_participant("Pat Lee", group_id="grp-test", dob=date(1990, 1, 1),
                          hire_date=date(2023, 1, 1), class_number=1, participant_id="prt-lee")
    return "plan-comp"


@pytest.fixture
def make_rate() -> Callable[..., Rate]:
    """Factory for in-memory rates."""

    def _make(
        rate: str = "100",
        start: date = date(2024, 1, 1),
        end: date | None = None,
        rate_id: str = "rate-1",
        **kwargs: object,
    ) -> Rate:
        return Rate(id=rate_id, rate=Decimal(rate), start_date=start, end_date=end, **kwargs)

    return _make


@pytest.fixture
def percentage_policy() -> ContributionPolicy:
    return ContributionPolicy(
        type=ContributionType.PERCENTAGE,
        value=Decimal("50"),
        spouse_value=Decimal("25"),
        child_value=Decimal("25"),
    )
