"""Lease ORM model with billing terms."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentledger.models import Base, BaseModel


class BillingMode(str, Enum):
    """When rent for a service month falls due."""

    PREPAID = "prepaid"
    """Due at the start of the service month"""

    POSTPAID = "postpaid"
    """Due after the service month ends"""


class Lease(Base, BaseModel):
    """Model representing a tenant's lease and its billing terms.

    Owned by the lease registry. The ledger copies monthly_rent into each rent
    period at creation time and otherwise only reads this row.
    """

    __tablename__ = "leases"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
        comment="Tenant bound by the lease",
    )
    property_id: Mapped[int | None] = mapped_column(
        ForeignKey("properties.id"),
        nullable=True,
        index=True,
        comment="Leased property",
    )
    lease_start: Mapped[date] = mapped_column(Date, nullable=False)
    lease_end: Mapped[date] = mapped_column(Date, nullable=False)
    due_day: Mapped[int] = mapped_column(
        nullable=False,
        default=1,
        comment="Day of month rent is due (1-31, clamped to month length)",
    )
    monthly_rent: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Rent per calendar month",
    )
    billing_mode: Mapped[BillingMode] = mapped_column(
        String(20),
        nullable=False,
        default=BillingMode.PREPAID.value,
        comment="prepaid or postpaid",
    )
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="active",
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(  # noqa: F821
        "Tenant",
        foreign_keys=[tenant_id],
    )
    rent_periods: Mapped[list["RentPeriod"]] = relationship(  # noqa: F821
        "RentPeriod",
        back_populates="lease",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_lease_tenant_start", "tenant_id", "lease_start"),)

    def __repr__(self) -> str:
        return (
            f"<Lease(id={self.id}, tenant_id={self.tenant_id}, "
            f"rent={self.monthly_rent}, {self.lease_start}..{self.lease_end})>"
        )


__all__ = ["Lease", "BillingMode"]
