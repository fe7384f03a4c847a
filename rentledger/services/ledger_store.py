"""Rent period persistence.

LedgerStore is the repository the ledger and allocation engine are written
against: insert with unique-key conflict detection, a balance-conditioned
update, and ordered range reads. SqlAlchemyLedgerStore is the production
implementation; tests use an in-memory store with the same contract.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rentledger.models.rent_period import RentPeriod, RentPeriodStatus
from rentledger.services.billing_calendar import PeriodKey
from rentledger.services.errors import ConcurrentModification, StoreUnavailable

logger = logging.getLogger(__name__)

OUTSTANDING_STATUSES = (RentPeriodStatus.UNPAID, RentPeriodStatus.PARTIAL)


def status_for_balance(due_amount: Decimal, balance: Decimal) -> RentPeriodStatus:
    """Derive period status from its balance.

    A fully settled period (including a zero-rent one) is PAID, an untouched
    one is UNPAID, anything in between is PARTIAL.
    """
    if balance <= 0:
        return RentPeriodStatus.PAID
    if balance >= due_amount:
        return RentPeriodStatus.UNPAID
    return RentPeriodStatus.PARTIAL


@dataclass(frozen=True)
class RentPeriodSnapshot:
    """Rent period state as read at a point in time."""

    id: int
    lease_id: int
    month: int
    year: int
    due_date: date
    due_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    status: RentPeriodStatus
    last_payment_date: date | None = None

    @property
    def key(self) -> PeriodKey:
        return PeriodKey(self.year, self.month)

    @property
    def is_outstanding(self) -> bool:
        return self.status in OUTSTANDING_STATUSES

    @classmethod
    def from_model(cls, period: RentPeriod) -> "RentPeriodSnapshot":
        return cls(
            id=period.id,
            lease_id=period.lease_id,
            month=period.month,
            year=period.year,
            due_date=period.due_date,
            due_amount=Decimal(str(period.due_amount)),
            paid_amount=Decimal(str(period.paid_amount)),
            balance=Decimal(str(period.balance)),
            status=RentPeriodStatus(period.status),
            last_payment_date=period.last_payment_date,
        )

    def after_payment(self, amount: Decimal, payment_date: date) -> "RentPeriodSnapshot":
        """Return the state this period has once amount is applied to it."""
        balance = self.balance - amount
        return replace(
            self,
            paid_amount=self.paid_amount + amount,
            balance=balance,
            status=status_for_balance(self.due_amount, balance),
            last_payment_date=payment_date,
        )


class LedgerStore(Protocol):
    """Storage contract for rent periods."""

    def insert_period(
        self, lease_id: int, key: PeriodKey, due_date: date, due_amount: Decimal
    ) -> bool:
        """Insert an unpaid period; False if (lease_id, month, year) already exists."""
        ...

    def list_periods(self, lease_id: int) -> list[RentPeriodSnapshot]:
        """All periods of a lease ordered by (year, month)."""
        ...

    def list_outstanding(
        self, lease_id: int, through: PeriodKey | None = None
    ) -> list[RentPeriodSnapshot]:
        """Unpaid/partial periods ordered by (year, month), optionally up to through."""
        ...

    def get_period(self, period_id: int) -> RentPeriodSnapshot | None: ...

    def compare_and_update(
        self, period: RentPeriodSnapshot, amount: Decimal, payment_date: date
    ) -> RentPeriodSnapshot:
        """Apply amount if the stored balance still equals period.balance.

        Raises ConcurrentModification otherwise.
        """
        ...


class SqlAlchemyLedgerStore:
    """LedgerStore over the rent_periods table.

    Every write commits on its own so each period change is an independent
    atomic step.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def insert_period(
        self, lease_id: int, key: PeriodKey, due_date: date, due_amount: Decimal
    ) -> bool:
        """Insert a new unpaid rent period.

        Args:
            lease_id: Owning lease
            key: Period month/year
            due_date: Derived due date
            due_amount: Rent copied from the lease

        Returns:
            True if inserted, False if the unique key already existed

        Raises:
            StoreUnavailable: On any other database failure
        """
        period = RentPeriod(
            lease_id=lease_id,
            month=key.month,
            year=key.year,
            due_date=due_date,
            due_amount=due_amount,
            paid_amount=Decimal("0.00"),
            balance=due_amount,
            status=status_for_balance(due_amount, due_amount).value,
        )
        self.db.add(period)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.debug("Rent period %s for lease %d already exists", key, lease_id)
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Failed to insert rent period {key} for lease {lease_id}: {e}") from e
        return True

    def list_periods(self, lease_id: int) -> list[RentPeriodSnapshot]:
        query = self.db.query(RentPeriod).filter(RentPeriod.lease_id == lease_id)
        return self._fetch(query, f"periods of lease {lease_id}")

    def list_outstanding(
        self, lease_id: int, through: PeriodKey | None = None
    ) -> list[RentPeriodSnapshot]:
        query = self.db.query(RentPeriod).filter(
            RentPeriod.lease_id == lease_id,
            RentPeriod.status.in_([s.value for s in OUTSTANDING_STATUSES]),
        )
        if through is not None:
            query = query.filter(
                or_(
                    RentPeriod.year < through.year,
                    and_(RentPeriod.year == through.year, RentPeriod.month <= through.month),
                )
            )
        return self._fetch(query, f"outstanding periods of lease {lease_id}")

    def get_period(self, period_id: int) -> RentPeriodSnapshot | None:
        try:
            period = self.db.get(RentPeriod, period_id)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to read rent period {period_id}: {e}") from e
        return RentPeriodSnapshot.from_model(period) if period else None

    def compare_and_update(
        self, period: RentPeriodSnapshot, amount: Decimal, payment_date: date
    ) -> RentPeriodSnapshot:
        """Conditionally apply a payment portion to one period.

        Issues a single UPDATE guarded by the balance observed at decision time.

        Raises:
            ConcurrentModification: If the balance changed since it was read
            StoreUnavailable: On database failure
        """
        updated = period.after_payment(amount, payment_date)
        stmt = (
            update(RentPeriod)
            .where(RentPeriod.id == period.id, RentPeriod.balance == period.balance)
            .values(
                paid_amount=updated.paid_amount,
                balance=updated.balance,
                status=updated.status.value,
                last_payment_date=payment_date,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                raise ConcurrentModification(period.id, period.balance)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Failed to update rent period {period.id}: {e}") from e
        return updated

    def _fetch(self, query, what: str) -> list[RentPeriodSnapshot]:
        try:
            periods = query.order_by(RentPeriod.year, RentPeriod.month).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to read {what}: {e}") from e
        return [RentPeriodSnapshot.from_model(p) for p in periods]


__all__ = [
    "LedgerStore",
    "RentPeriodSnapshot",
    "SqlAlchemyLedgerStore",
    "OUTSTANDING_STATUSES",
    "status_for_balance",
]
