"""Pytest configuration and shared fixtures."""

import os
from datetime import date
from decimal import Decimal

# Set test database URL BEFORE any imports from rentledger
# This ensures the SessionLocal and engine use an in-memory database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rentledger.models import Base, BillingMode, Lease, Property, Tenant  # noqa: E402


@pytest.fixture
def db_session():
    """Create test database session."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def sunset_villas(db_session):
    """Create a property."""
    prop = Property(name="Sunset Villas", address="12 Ocean Road")
    db_session.add(prop)
    db_session.commit()
    return prop


@pytest.fixture
def make_tenant(db_session):
    """Factory creating tenants."""

    def _make(full_name: str, property_id: int | None = None) -> Tenant:
        tenant = Tenant(full_name=full_name, property_id=property_id)
        db_session.add(tenant)
        db_session.commit()
        return tenant

    return _make


@pytest.fixture
def make_lease(db_session):
    """Factory creating leases with sensible defaults."""

    def _make(
        tenant: Tenant,
        monthly_rent: str = "500.00",
        lease_start: date = date(2024, 1, 1),
        lease_end: date = date(2030, 12, 31),
        due_day: int = 5,
        billing_mode: BillingMode = BillingMode.PREPAID,
    ) -> Lease:
        lease = Lease(
            tenant_id=tenant.id,
            property_id=tenant.property_id,
            monthly_rent=Decimal(monthly_rent),
            lease_start=lease_start,
            lease_end=lease_end,
            due_day=due_day,
            billing_mode=billing_mode.value,
        )
        db_session.add(lease)
        db_session.commit()
        return lease

    return _make
