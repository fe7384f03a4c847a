"""Tenant ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentledger.models import Base, BaseModel


class Tenant(Base, BaseModel):
    """Model representing a tenant occupying a unit of a property.

    The ledger never writes tenants; it reads them to scan for arrears and to
    put a display name on report rows.
    """

    __tablename__ = "tenants"

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Tenant display name",
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    property_id: Mapped[int | None] = mapped_column(
        ForeignKey("properties.id"),
        nullable=True,
        index=True,
        comment="Property the tenant lives in",
    )
    unit_id: Mapped[int | None] = mapped_column(
        nullable=True,
        comment="Unit reference in the unit registry",
    )

    # Relationships
    property: Mapped["Property | None"] = relationship(  # noqa: F821
        "Property",
        foreign_keys=[property_id],
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, full_name={self.full_name}, property_id={self.property_id})>"


__all__ = ["Tenant"]
