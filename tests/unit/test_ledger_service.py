"""Unit tests for the rent period ledger against an in-memory store."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_fakes import InMemoryLedgerStore, StaticLeaseLookup
from rentledger.models.lease import BillingMode
from rentledger.models.rent_period import RentPeriodStatus
from rentledger.services.billing_calendar import PeriodKey, month_count
from rentledger.services.errors import ConcurrentModification, InvalidPayment, LeaseNotFound
from rentledger.services.ledger_service import RentPeriodLedger
from rentledger.services.ledger_store import status_for_balance
from rentledger.services.lookup_service import LeaseTerms


def make_terms(**overrides) -> LeaseTerms:
    values = dict(
        id=1,
        tenant_id=10,
        property_id=100,
        monthly_rent=Decimal("500.00"),
        lease_start=date(2024, 1, 1),
        lease_end=date(2030, 12, 31),
        due_day=5,
        billing_mode=BillingMode.PREPAID,
    )
    values.update(overrides)
    return LeaseTerms(**values)


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store):
    return RentPeriodLedger(store, StaticLeaseLookup([make_terms()]), backfill_months=12)


class TestStatusForBalance:
    """Status is a pure function of balance."""

    def test_untouched_is_unpaid(self):
        assert status_for_balance(Decimal("1000"), Decimal("1000")) == RentPeriodStatus.UNPAID

    def test_between_is_partial(self):
        assert status_for_balance(Decimal("1000"), Decimal("600")) == RentPeriodStatus.PARTIAL

    def test_zero_is_paid(self):
        assert status_for_balance(Decimal("1000"), Decimal("0")) == RentPeriodStatus.PAID

    def test_zero_rent_is_paid(self):
        assert status_for_balance(Decimal("0"), Decimal("0")) == RentPeriodStatus.PAID


class TestEnsurePeriods:
    """Test lazy, idempotent period materialization."""

    def test_covers_every_month_from_start(self, ledger, store):
        lease = make_terms(lease_start=date(2023, 9, 15))
        as_of = date(2024, 6, 1)

        created = ledger.ensure_periods(lease, as_of)

        assert len(created) == month_count(lease.lease_start, as_of) == 10
        keys = [p.key for p in store.list_periods(lease.id)]
        assert keys[0] == PeriodKey(2023, 9)
        assert keys[-1] == PeriodKey(2024, 6)
        assert len(set(keys)) == len(keys)

    def test_copies_rent_and_starts_unpaid(self, ledger, store):
        ledger.ensure_periods(make_terms(), date(2024, 2, 10))

        for period in store.list_periods(1):
            assert period.due_amount == Decimal("500.00")
            assert period.paid_amount == Decimal("0.00")
            assert period.balance == Decimal("500.00")
            assert period.status == RentPeriodStatus.UNPAID
            assert period.last_payment_date is None

    def test_due_dates_follow_billing_mode(self, store):
        ledger = RentPeriodLedger(store)
        ledger.ensure_periods(make_terms(due_day=31, billing_mode=BillingMode.POSTPAID), date(2024, 2, 10))

        january, february = store.list_periods(1)
        assert january.due_date == date(2024, 2, 29)
        assert february.due_date == date(2024, 3, 31)

    def test_repeat_creates_nothing_and_changes_nothing(self, ledger, store):
        lease = make_terms()
        ledger.ensure_periods(lease, date(2024, 3, 1))
        january = store.by_key(1, 2024, 1)
        ledger.apply_to_period(january, Decimal("200.00"), date(2024, 1, 20))
        before = store.list_periods(1)

        created = ledger.ensure_periods(lease, date(2024, 3, 1))

        assert created == []
        assert store.list_periods(1) == before

    def test_extends_when_as_of_moves_forward(self, ledger, store):
        lease = make_terms()
        ledger.ensure_periods(lease, date(2024, 3, 1))

        created = ledger.ensure_periods(lease, date(2024, 5, 1))

        assert created == [PeriodKey(2024, 4), PeriodKey(2024, 5)]
        assert len(store.list_periods(1)) == 5

    def test_backfill_floor_twelve_months(self, ledger, store):
        lease = make_terms(lease_start=date(2020, 1, 1))

        ledger.ensure_periods(lease, date(2024, 6, 10))

        keys = [p.key for p in store.list_periods(1)]
        assert keys[0] == PeriodKey(2023, 6)
        assert keys[-1] == PeriodKey(2024, 6)
        assert len(keys) == 13

    def test_stops_at_lease_end(self, ledger, store):
        lease = make_terms(lease_end=date(2024, 3, 31))

        ledger.ensure_periods(lease, date(2024, 6, 1))

        assert [p.key for p in store.list_periods(1)][-1] == PeriodKey(2024, 3)

    def test_future_lease_creates_nothing(self, ledger, store):
        lease = make_terms(lease_start=date(2024, 9, 1))

        assert ledger.ensure_periods(lease, date(2024, 6, 1)) == []
        assert store.list_periods(1) == []

    def test_concurrently_inserted_period_is_not_reported_as_created(self, ledger, store):
        lease = make_terms()
        original_insert = store.insert_period

        def racing_insert(lease_id, key, due_date, due_amount):
            # Someone else inserts the same key first
            original_insert(lease_id, key, due_date, due_amount)
            return original_insert(lease_id, key, due_date, due_amount)

        store.insert_period = racing_insert

        assert ledger.ensure_periods(lease, date(2024, 2, 1)) == []
        assert len(store.list_periods(1)) == 2

    def test_by_lease_id(self, ledger, store):
        created = ledger.ensure_periods_for_lease_id(1, date(2024, 2, 1))

        assert created == [PeriodKey(2024, 1), PeriodKey(2024, 2)]

    def test_by_unknown_lease_id(self, ledger):
        with pytest.raises(LeaseNotFound):
            ledger.ensure_periods_for_lease_id(99, date(2024, 2, 1))


class TestOutstandingPeriods:
    """Test outstanding period ordering and filtering."""

    def test_oldest_first_excluding_paid(self, ledger, store):
        lease = make_terms()
        ledger.ensure_periods(lease, date(2024, 4, 1))
        ledger.apply_to_period(store.by_key(1, 2024, 2), Decimal("500.00"), date(2024, 2, 3))
        ledger.apply_to_period(store.by_key(1, 2024, 3), Decimal("100.00"), date(2024, 3, 3))

        outstanding = ledger.outstanding_periods(lease)

        assert [p.key for p in outstanding] == [
            PeriodKey(2024, 1),
            PeriodKey(2024, 3),
            PeriodKey(2024, 4),
        ]

    def test_through_bounds_period_key(self, ledger):
        lease = make_terms()
        ledger.ensure_periods(lease, date(2024, 9, 1))

        outstanding = ledger.outstanding_periods(lease, through=PeriodKey(2024, 6))

        assert outstanding[-1].key == PeriodKey(2024, 6)


class TestApplyToPeriod:
    """Test atomic per-period application."""

    def test_partial_then_full(self, store):
        ledger = RentPeriodLedger(store)
        ledger.ensure_periods(make_terms(monthly_rent=Decimal("1000.00")), date(2024, 1, 10))
        period = store.by_key(1, 2024, 1)

        partial = ledger.apply_to_period(period, Decimal("400.00"), date(2024, 1, 10))
        assert partial.balance == Decimal("600.00")
        assert partial.paid_amount == Decimal("400.00")
        assert partial.status == RentPeriodStatus.PARTIAL
        assert partial.last_payment_date == date(2024, 1, 10)

        settled = ledger.apply_to_period(partial, Decimal("600.00"), date(2024, 1, 25))
        assert settled.balance == Decimal("0.00")
        assert settled.status == RentPeriodStatus.PAID
        assert settled.last_payment_date == date(2024, 1, 25)

    def test_rejects_non_positive_amount(self, ledger, store):
        ledger.ensure_periods(make_terms(), date(2024, 1, 10))

        with pytest.raises(InvalidPayment):
            ledger.apply_to_period(store.by_key(1, 2024, 1), Decimal("0"), date(2024, 1, 10))

    def test_rejects_overpaying_a_period(self, ledger, store):
        ledger.ensure_periods(make_terms(), date(2024, 1, 10))

        with pytest.raises(InvalidPayment, match="exceeds balance"):
            ledger.apply_to_period(store.by_key(1, 2024, 1), Decimal("500.01"), date(2024, 1, 10))

    def test_stale_read_conflicts(self, ledger, store):
        ledger.ensure_periods(make_terms(), date(2024, 1, 10))
        stale = store.by_key(1, 2024, 1)
        ledger.apply_to_period(stale, Decimal("100.00"), date(2024, 1, 10))

        with pytest.raises(ConcurrentModification):
            ledger.apply_to_period(stale, Decimal("100.00"), date(2024, 1, 11))

        assert store.by_key(1, 2024, 1).balance == Decimal("400.00")
