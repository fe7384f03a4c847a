"""Payment allocation engine: settles rent periods oldest-first.

Algorithm:
1. Resolve the tenant's lease
2. Materialize periods up to the payment date
3. Walk outstanding periods oldest-first, applying min(remaining, balance)
4. Report whatever is left as an unapplied remainder (advance)

Each period update is its own atomic compare-and-update. When another payment
changes a balance first, outstanding periods are re-read and the remaining
amount is allocated again from the top, a bounded number of times.

Ensures: sum(amount_applied) + remainder == amount (zero money loss/creation)
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation

from rentledger.config import settings
from rentledger.models.rent_period import RentPeriodStatus
from rentledger.services.billing_calendar import PeriodKey
from rentledger.services.errors import (
    AllocationConflict,
    AllocationInvariantError,
    ConcurrentModification,
    InvalidPayment,
)
from rentledger.services.ledger_service import RentPeriodLedger
from rentledger.services.lookup_service import LeaseLookup

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")


@dataclass(frozen=True)
class AllocationEntry:
    """One period's share of a payment."""

    period_id: int
    period_key: PeriodKey
    amount_applied: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    resulting_status: RentPeriodStatus


@dataclass
class AllocationReceipt:
    """Result of allocating one payment. Not persisted."""

    tenant_id: int
    lease_id: int
    amount: Decimal
    payment_date: date
    entries: list[AllocationEntry] = field(default_factory=list)
    remainder: Decimal = Decimal("0.00")

    @property
    def total_applied(self) -> Decimal:
        return sum((e.amount_applied for e in self.entries), Decimal("0.00"))

    @property
    def is_balanced(self) -> bool:
        return self.total_applied + self.remainder == self.amount


def to_money(value) -> Decimal:
    """Convert to a 2-place Decimal, going through str to avoid float artifacts.

    Raises:
        InvalidPayment: If value is not a finite number of whole cents
    """
    try:
        amount = Decimal(str(value))
        money = amount.quantize(CENT) if amount.is_finite() else None
    except InvalidOperation as e:
        raise InvalidPayment(f"Invalid payment amount {value!r}") from e
    if money is None:
        raise InvalidPayment(f"Invalid payment amount {value!r}")
    if abs(money) > MAX_AMOUNT:
        raise InvalidPayment(f"Payment amount {value} exceeds {MAX_AMOUNT}")
    if money != amount:
        raise InvalidPayment(f"Payment amount {value} has fractions of a cent")
    return money


class PaymentAllocationService:
    """Distributes payments over a lease's outstanding rent periods."""

    def __init__(
        self,
        ledger: RentPeriodLedger,
        leases: LeaseLookup,
        max_retries: int | None = None,
    ):
        """Initialize allocation service.

        Args:
            ledger: Rent period ledger
            leases: Lease lookup used to resolve the paying tenant's lease
            max_retries: Re-reads allowed after a conflict (default from settings)
        """
        self.ledger = ledger
        self.leases = leases
        self.max_retries = settings.allocation_max_retries if max_retries is None else max_retries

    def allocate(self, tenant_id: int, amount, payment_date: date) -> AllocationReceipt:
        """Allocate a payment to the tenant's rent periods.

        Not idempotent: every call is treated as a new payment.

        Args:
            tenant_id: Paying tenant
            amount: Payment amount (> 0)
            payment_date: Date the money was received

        Returns:
            AllocationReceipt with per-period entries and the unapplied remainder

        Raises:
            InvalidPayment: If amount is not positive
            LeaseNotFound: If the tenant has no lease
            AllocationConflict: If concurrent updates persist past max_retries
        """
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidPayment(f"Payment amount must be positive, got {amount}")

        lease = self.leases.lease_for_tenant(tenant_id)
        self.ledger.ensure_periods(lease, payment_date)

        receipt = AllocationReceipt(
            tenant_id=tenant_id,
            lease_id=lease.id,
            amount=amount,
            payment_date=payment_date,
        )
        remaining = amount
        conflicts = 0

        while True:
            try:
                for period in self.ledger.outstanding_periods(lease):
                    if remaining == 0:
                        break
                    applied = min(remaining, period.balance)
                    updated = self.ledger.apply_to_period(period, applied, payment_date)
                    receipt.entries.append(
                        AllocationEntry(
                            period_id=period.id,
                            period_key=period.key,
                            amount_applied=applied,
                            previous_balance=period.balance,
                            new_balance=updated.balance,
                            resulting_status=updated.status,
                        )
                    )
                    remaining -= applied
                break
            except ConcurrentModification as e:
                conflicts += 1
                if conflicts > self.max_retries:
                    receipt.remainder = remaining
                    logger.error(
                        "Allocation for tenant %d gave up after %d conflicts, %s of %s unallocated",
                        tenant_id,
                        conflicts,
                        remaining,
                        amount,
                    )
                    raise AllocationConflict(
                        f"Rent periods of lease {lease.id} kept changing during allocation; "
                        f"{remaining} of {amount} was not applied",
                        partial_receipt=receipt,
                    ) from e
                logger.warning(
                    "Conflict on period %d for tenant %d, retrying %s (attempt %d/%d)",
                    e.period_id,
                    tenant_id,
                    remaining,
                    conflicts,
                    self.max_retries,
                )

        receipt.remainder = remaining
        if not receipt.is_balanced:
            raise AllocationInvariantError(
                f"Allocation of {amount} applied {receipt.total_applied} "
                f"with remainder {receipt.remainder}"
            )

        logger.info(
            "Allocated payment of %s for tenant %d (lease %d) across %d periods, remainder %s",
            amount,
            tenant_id,
            lease.id,
            len(receipt.entries),
            receipt.remainder,
        )
        if receipt.remainder > 0:
            # Advance amounts are reported only; nothing is credited to future periods
            logger.info(
                "Tenant %d has unapplied advance of %s on %s",
                tenant_id,
                receipt.remainder,
                payment_date,
            )
        return receipt


__all__ = [
    "AllocationEntry",
    "AllocationReceipt",
    "PaymentAllocationService",
    "to_money",
]
