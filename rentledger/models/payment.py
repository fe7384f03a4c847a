"""Payment ORM model - append-only record of money received from a tenant."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.models import Base, BaseModel


class Payment(Base, BaseModel):
    """Tenant payment record.

    Payments are immutable once recorded. How a payment was spread over rent
    periods is not stored here; it is reflected in the rent periods themselves.

    Attributes:
        tenant_id: Paying tenant
        amount: Amount received (always positive)
        payment_date: Date the money was received
        method: Payment channel (cash, bank, mobile money, ...)
        status: Processing status reported by the payment channel
    """

    __tablename__ = "payments"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2), nullable=False
    )
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="completed")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Payment(id={self.id}, tenant_id={self.tenant_id}, amount={self.amount})>"


__all__ = ["Payment"]
