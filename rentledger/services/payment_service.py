"""Payment service for recording tenant payments and listing payment history.

Provides methods for:
- Recording a payment and allocating it to rent periods
- Payment history decorated with tenant and property names
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentledger.config import settings
from rentledger.models.payment import Payment
from rentledger.services.allocation_service import (
    AllocationReceipt,
    PaymentAllocationService,
    to_money,
)
from rentledger.services.errors import InvalidPayment, LedgerError, StoreUnavailable
from rentledger.services.lookup_service import DirectoryLookup, display_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentRecord:
    """Payment row with display names resolved."""

    id: int
    tenant_id: int
    tenant: str
    property: str
    amount: Decimal
    payment_date: date
    method: str | None
    status: str


class PaymentService:
    """Records payments and serves payment history."""

    def __init__(
        self,
        db: Session,
        allocation: PaymentAllocationService,
        directory: DirectoryLookup,
        placeholder: str | None = None,
    ):
        """Initialize payment service.

        Args:
            db: SQLAlchemy database session
            allocation: Allocation engine run after each recorded payment
            directory: Tenant/property lookup for history decoration
            placeholder: Display value when a name cannot be resolved
        """
        self.db = db
        self.allocation = allocation
        self.directory = directory
        self.placeholder = placeholder or settings.unknown_placeholder

    def record_payment(
        self,
        tenant_id: int,
        amount,
        payment_date: date,
        method: str | None = None,
        status: str = "completed",
    ) -> tuple[Payment, AllocationReceipt]:
        """Record a payment and allocate it to the tenant's rent periods.

        The payment row is committed before allocation starts; a failed
        allocation never removes it.

        Args:
            tenant_id: Paying tenant
            amount: Amount received (> 0)
            payment_date: Date received
            method: Payment channel
            status: Channel status

        Returns:
            Tuple of (Payment, AllocationReceipt)

        Raises:
            InvalidPayment: If amount is not positive
            StoreUnavailable: If the payment cannot be stored
        """
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidPayment(f"Payment amount must be positive, got {amount}")

        payment = Payment(
            tenant_id=tenant_id,
            amount=amount,
            payment_date=payment_date,
            method=method,
            status=status,
        )
        self.db.add(payment)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailable(f"Failed to record payment for tenant {tenant_id}: {e}") from e
        self.db.refresh(payment)

        logger.info(
            "Recorded payment id=%d tenant=%d amount=%s date=%s method=%s",
            payment.id,
            tenant_id,
            amount,
            payment_date,
            method,
        )

        receipt = self.allocation.allocate(tenant_id, amount, payment_date)
        return payment, receipt

    def payment_history(self, tenant_id: int | None = None) -> list[PaymentRecord]:
        """List payments newest first with tenant and property names.

        Args:
            tenant_id: Restrict to one tenant (default: all payments)

        Returns:
            List of PaymentRecord
        """
        query = self.db.query(Payment)
        if tenant_id is not None:
            query = query.filter(Payment.tenant_id == tenant_id)
        try:
            payments = query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to read payments: {e}") from e

        try:
            tenants = {t.id: t for t in self.directory.list_tenants()}
        except LedgerError as e:
            logger.warning("Tenant directory unavailable, history names degrade: %s", e.message)
            tenants = {}

        records = []
        for payment in payments:
            tenant = tenants.get(payment.tenant_id)
            records.append(
                PaymentRecord(
                    id=payment.id,
                    tenant_id=payment.tenant_id,
                    tenant=(tenant.full_name if tenant and tenant.full_name else self.placeholder),
                    property=display_name(
                        self.directory.property_name,
                        tenant.property_id if tenant else None,
                        self.placeholder,
                    ),
                    amount=Decimal(str(payment.amount)),
                    payment_date=payment.payment_date,
                    method=payment.method,
                    status=payment.status,
                )
            )
        return records


__all__ = ["PaymentRecord", "PaymentService"]
