"""Read-only lookups the ledger consults by reference.

LeaseLookup is critical: allocation cannot proceed without lease terms.
DirectoryLookup only decorates reports with tenant and property names.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentledger.models.lease import BillingMode, Lease
from rentledger.models.property import Property
from rentledger.models.tenant import Tenant
from rentledger.services.errors import LeaseNotFound, LookupUnavailable, StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaseTerms:
    """Billing terms of a lease as seen by the ledger."""

    id: int
    tenant_id: int
    monthly_rent: Decimal
    lease_start: date
    lease_end: date
    due_day: int
    billing_mode: BillingMode
    property_id: int | None = None

    @classmethod
    def from_model(cls, lease: Lease) -> "LeaseTerms":
        return cls(
            id=lease.id,
            tenant_id=lease.tenant_id,
            property_id=lease.property_id,
            monthly_rent=Decimal(str(lease.monthly_rent)),
            lease_start=lease.lease_start,
            lease_end=lease.lease_end,
            due_day=lease.due_day,
            billing_mode=BillingMode(lease.billing_mode or BillingMode.PREPAID),
        )


@dataclass(frozen=True)
class TenantRef:
    """Tenant identity used to drive the arrears scan."""

    id: int
    full_name: str | None
    property_id: int | None = None


class LeaseLookup(Protocol):
    """Resolve lease terms."""

    def lease_for_tenant(self, tenant_id: int) -> LeaseTerms:
        """Raises LeaseNotFound if the tenant has no lease."""
        ...

    def get_lease(self, lease_id: int) -> LeaseTerms:
        """Raises LeaseNotFound if the lease does not exist."""
        ...

    def list_leases(self) -> list[LeaseTerms]: ...


class DirectoryLookup(Protocol):
    """Tenant and property records. Failures raise LookupUnavailable."""

    def list_tenants(self) -> list[TenantRef]: ...

    def tenant_name(self, tenant_id: int) -> str | None: ...

    def property_name(self, property_id: int) -> str | None: ...


def _lease_terms(lease: Lease) -> LeaseTerms:
    """Convert a lease row, reporting unusable billing terms as a store error."""
    try:
        return LeaseTerms.from_model(lease)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise StoreUnavailable(f"Lease {lease.id} has unreadable billing terms: {e}") from e


class SqlAlchemyLeaseLookup:
    """LeaseLookup backed by the leases table."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def lease_for_tenant(self, tenant_id: int) -> LeaseTerms:
        """Return the tenant's lease, latest start first if there are several.

        Args:
            tenant_id: Tenant ID

        Returns:
            LeaseTerms of the current lease

        Raises:
            LeaseNotFound: If the tenant has no lease
            StoreUnavailable: If the database cannot be read or the lease row
                holds billing terms the ledger cannot use
        """
        try:
            lease = (
                self.db.query(Lease)
                .filter(Lease.tenant_id == tenant_id)
                .order_by(Lease.lease_start.desc(), Lease.id.desc())
                .first()
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to read lease for tenant {tenant_id}: {e}") from e

        if not lease:
            raise LeaseNotFound(tenant_id=tenant_id)
        return _lease_terms(lease)

    def get_lease(self, lease_id: int) -> LeaseTerms:
        try:
            lease = self.db.get(Lease, lease_id)
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to read lease {lease_id}: {e}") from e

        if not lease:
            raise LeaseNotFound(lease_id=lease_id)
        return _lease_terms(lease)

    def list_leases(self) -> list[LeaseTerms]:
        try:
            leases = self.db.query(Lease).order_by(Lease.id).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to list leases: {e}") from e
        return [_lease_terms(lease) for lease in leases]


class SqlAlchemyDirectoryLookup:
    """DirectoryLookup backed by the tenants and properties tables."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_tenants(self) -> list[TenantRef]:
        try:
            tenants = self.db.query(Tenant).order_by(Tenant.id).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Failed to list tenants: {e}") from e
        return [TenantRef(id=t.id, full_name=t.full_name, property_id=t.property_id) for t in tenants]

    def tenant_name(self, tenant_id: int) -> str | None:
        try:
            tenant = self.db.get(Tenant, tenant_id)
        except SQLAlchemyError as e:
            raise LookupUnavailable(f"Tenant lookup failed for {tenant_id}: {e}") from e
        return tenant.full_name if tenant else None

    def property_name(self, property_id: int) -> str | None:
        try:
            prop = self.db.get(Property, property_id)
        except SQLAlchemyError as e:
            raise LookupUnavailable(f"Property lookup failed for {property_id}: {e}") from e
        return prop.name if prop else None


def display_name(lookup, key: int | None, placeholder: str = "Unknown") -> str:
    """Resolve a display name, degrading to placeholder on absence or failure.

    Args:
        lookup: Bound lookup method (e.g. directory.tenant_name)
        key: ID to resolve; None yields the placeholder
        placeholder: Value used when the name cannot be resolved

    Returns:
        Display name or placeholder
    """
    if key is None:
        return placeholder
    try:
        name = lookup(key)
    except LookupUnavailable as e:
        logger.warning("Display lookup failed, using placeholder: %s", e.message)
        return placeholder
    return name or placeholder


__all__ = [
    "LeaseTerms",
    "TenantRef",
    "LeaseLookup",
    "DirectoryLookup",
    "SqlAlchemyLeaseLookup",
    "SqlAlchemyDirectoryLookup",
    "display_name",
]
