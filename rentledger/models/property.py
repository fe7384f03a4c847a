"""Property ORM model (read-only to the ledger, used for report decoration)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.models import Base, BaseModel


class Property(Base, BaseModel):
    """Model representing a managed property (building, compound, house)."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the property",
    )
    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Postal address",
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"


__all__ = ["Property"]
