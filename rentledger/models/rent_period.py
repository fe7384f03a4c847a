"""Rent period ORM model - one row per lease per calendar month."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentledger.models import Base, BaseModel


class RentPeriodStatus(str, Enum):
    """Settlement state of a rent period."""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class RentPeriod(Base, BaseModel):
    """Model representing the rent obligation of a lease for one calendar month.

    due_amount is frozen at creation. paid_amount, balance, status and
    last_payment_date only change through the allocation engine, and balance is
    the compare-and-update guard for concurrent payments.
    """

    __tablename__ = "rent_periods"

    lease_id: Mapped[int] = mapped_column(
        ForeignKey("leases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Lease this period belongs to",
    )
    month: Mapped[int] = mapped_column(nullable=False, comment="Calendar month (1-12)")
    year: Mapped[int] = mapped_column(nullable=False, comment="Calendar year")
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Monthly rent copied from the lease at creation time",
    )
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="due_amount - paid_amount",
    )
    status: Mapped[RentPeriodStatus] = mapped_column(
        String(20),
        nullable=False,
        default=RentPeriodStatus.UNPAID.value,
    )
    last_payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    lease: Mapped["Lease"] = relationship(  # noqa: F821
        "Lease",
        back_populates="rent_periods",
        foreign_keys=[lease_id],
    )

    __table_args__ = (
        UniqueConstraint("lease_id", "month", "year", name="uq_rent_period_lease_month_year"),
        Index("idx_rent_period_lease_status", "lease_id", "status"),
        Index("idx_rent_period_lease_year_month", "lease_id", "year", "month"),
    )

    def __repr__(self) -> str:
        return (
            f"<RentPeriod(id={self.id}, lease_id={self.lease_id}, "
            f"period={self.year}-{self.month:02d}, balance={self.balance}, status={self.status})>"
        )


__all__ = ["RentPeriod", "RentPeriodStatus"]
