"""Rent period ledger: materializes and settles monthly rent periods."""

import logging
from datetime import date
from decimal import Decimal

from rentledger.config import settings
from rentledger.services.billing_calendar import (
    PeriodKey,
    add_months,
    due_date_of,
    periods_between,
)
from rentledger.services.errors import InvalidPayment
from rentledger.services.ledger_store import LedgerStore, RentPeriodSnapshot
from rentledger.services.lookup_service import LeaseLookup, LeaseTerms

logger = logging.getLogger(__name__)


class RentPeriodLedger:
    """Owns rent period state for leases.

    Periods are created lazily and never updated by materialization; payments
    change them only through apply_to_period.
    """

    def __init__(
        self,
        store: LedgerStore,
        leases: LeaseLookup | None = None,
        backfill_months: int | None = None,
        postpaid_offset_months: int | None = None,
    ):
        """Initialize ledger.

        Args:
            store: Rent period repository
            leases: Lease lookup, needed only for ensure_periods_for_lease_id
            backfill_months: Materialization horizon before as_of (default from settings)
            postpaid_offset_months: Postpaid billing offset (default from settings)
        """
        self.store = store
        self.leases = leases
        self.backfill_months = (
            settings.backfill_months if backfill_months is None else backfill_months
        )
        self.postpaid_offset_months = (
            settings.postpaid_offset_months
            if postpaid_offset_months is None
            else postpaid_offset_months
        )

    def ensure_periods(self, lease: LeaseTerms, as_of: date) -> list[PeriodKey]:
        """Create any missing rent periods for the lease up to as_of.

        Covers max(lease start, as_of - backfill_months) through
        min(lease end, as_of). Existing periods are left untouched, and a
        period inserted concurrently by someone else counts as present.

        Args:
            lease: Lease terms
            as_of: Materialization date

        Returns:
            Keys of the periods this call created, oldest first
        """
        floor = max(lease.lease_start, add_months(as_of, -self.backfill_months))
        wanted = periods_between(floor, lease.lease_end, today=as_of)
        if not wanted:
            return []

        existing = {p.key for p in self.store.list_periods(lease.id)}
        created = []
        for key in wanted:
            if key in existing:
                continue
            due = due_date_of(
                key.month,
                key.year,
                lease.due_day,
                lease.billing_mode,
                self.postpaid_offset_months,
            )
            if self.store.insert_period(lease.id, key, due, lease.monthly_rent):
                created.append(key)

        if created:
            logger.info(
                "Created %d rent periods for lease %d (%s..%s)",
                len(created),
                lease.id,
                created[0],
                created[-1],
            )
        return created

    def ensure_periods_for_lease_id(self, lease_id: int, as_of: date) -> list[PeriodKey]:
        """Maintenance form of ensure_periods that resolves the lease first.

        Raises:
            LeaseNotFound: If the lease does not exist
        """
        if self.leases is None:
            raise RuntimeError("RentPeriodLedger was created without a lease lookup")
        return self.ensure_periods(self.leases.get_lease(lease_id), as_of)

    def outstanding_periods(
        self, lease: LeaseTerms, through: PeriodKey | None = None
    ) -> list[RentPeriodSnapshot]:
        """Unpaid and partially paid periods, oldest first.

        The order is the settlement order: older debt is always cleared first.
        """
        return self.store.list_outstanding(lease.id, through=through)

    def list_periods(self, lease_id: int) -> list[RentPeriodSnapshot]:
        return self.store.list_periods(lease_id)

    def apply_to_period(
        self,
        period: RentPeriodSnapshot,
        amount_applied: Decimal,
        payment_date: date,
    ) -> RentPeriodSnapshot:
        """Atomically apply part of a payment to one period.

        Args:
            period: Period as read when the amount was decided
            amount_applied: Portion of the payment for this period
            payment_date: Date recorded as last_payment_date

        Returns:
            Period state after the update

        Raises:
            InvalidPayment: If amount_applied is not positive or exceeds period.balance
            ConcurrentModification: If the stored balance changed since period was read
        """
        if amount_applied <= 0:
            raise InvalidPayment(f"Applied amount must be positive, got {amount_applied}")
        if amount_applied > period.balance:
            raise InvalidPayment(
                f"Applied amount {amount_applied} exceeds balance {period.balance} "
                f"of period {period.key}"
            )

        updated = self.store.compare_and_update(period, amount_applied, payment_date)
        logger.debug(
            "Applied %s to lease %d period %s: balance %s -> %s (%s)",
            amount_applied,
            period.lease_id,
            period.key,
            period.balance,
            updated.balance,
            updated.status.value,
        )
        return updated


__all__ = ["RentPeriodLedger"]
