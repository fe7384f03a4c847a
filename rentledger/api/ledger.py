"""Rent ledger API endpoints.

Thin transport over the ledger services:
- Payment recording and allocation
- Payment history
- Overdue (arrears) report
- Rent period materialization and listing per lease
"""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from rentledger.services import get_db
from rentledger.services.allocation_service import AllocationReceipt
from rentledger.services.arrears_service import TenantArrears
from rentledger.services.wiring import LedgerServices, build_ledger_services

router = APIRouter(prefix="/api", tags=["ledger"])


def get_services(db: Session = Depends(get_db)) -> LedgerServices:
    """Build request-scoped ledger services."""
    return build_ledger_services(db)


# Request schemas
class AllocateRequest(BaseModel):
    """Request body for allocating a payment without recording it."""

    tenant_id: int
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    payment_date: date


class PaymentRequest(AllocateRequest):
    """Request body for recording a payment."""

    method: str | None = None
    status: str = "completed"


# Response schemas
class AllocationEntryResponse(BaseModel):
    period: str  # "YYYY-MM"
    amount_applied: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    status: str


class AllocationReceiptResponse(BaseModel):
    """Allocation receipt returned after a payment."""

    tenant_id: int
    lease_id: int
    amount: Decimal
    payment_date: date
    entries: list[AllocationEntryResponse]
    remainder: Decimal  # Unapplied advance, reported only

    @classmethod
    def from_receipt(cls, receipt: AllocationReceipt) -> "AllocationReceiptResponse":
        return cls(
            tenant_id=receipt.tenant_id,
            lease_id=receipt.lease_id,
            amount=receipt.amount,
            payment_date=receipt.payment_date,
            entries=[
                AllocationEntryResponse(
                    period=str(e.period_key),
                    amount_applied=e.amount_applied,
                    previous_balance=e.previous_balance,
                    new_balance=e.new_balance,
                    status=e.resulting_status.value,
                )
                for e in receipt.entries
            ],
            remainder=receipt.remainder,
        )


class PaymentResponse(BaseModel):
    """Recorded payment with its allocation."""

    id: int
    tenant_id: int
    amount: Decimal
    payment_date: date
    method: str | None
    status: str
    allocation: AllocationReceiptResponse


class PaymentHistoryItem(BaseModel):
    id: int
    tenant: str
    property: str
    method: str | None
    amount: Decimal
    status: str
    payment_date: date

    model_config = ConfigDict(from_attributes=True)


class PeriodArrearsResponse(BaseModel):
    period: str
    due_date: date
    expected: Decimal
    paid: Decimal
    balance: Decimal
    partial: bool
    days_overdue: int


class TenantArrearsResponse(BaseModel):
    """One row of the overdue report."""

    tenant_id: int
    tenant_name: str
    property: str
    lease_id: int
    billing_mode: str
    due_day_of_month: int
    total_amount_due: Decimal
    months_overdue: int
    days_overdue: int
    oldest_period: str
    last_payment_date: date | None
    periods: list[PeriodArrearsResponse]

    @classmethod
    def from_arrears(cls, entry: TenantArrears) -> "TenantArrearsResponse":
        return cls(
            tenant_id=entry.tenant_id,
            tenant_name=entry.tenant_name,
            property=entry.property_name,
            lease_id=entry.lease_id,
            billing_mode=entry.billing_mode,
            due_day_of_month=entry.due_day,
            total_amount_due=entry.total_balance,
            months_overdue=entry.period_count,
            days_overdue=entry.days_overdue,
            oldest_period=str(entry.oldest_period),
            last_payment_date=entry.last_payment_date,
            periods=[
                PeriodArrearsResponse(
                    period=str(p.period_key),
                    due_date=p.due_date,
                    expected=p.expected,
                    paid=p.paid,
                    balance=p.balance,
                    partial=p.partial,
                    days_overdue=p.days_overdue,
                )
                for p in entry.periods
            ],
        )


class RentPeriodResponse(BaseModel):
    id: int
    period: str
    due_date: date
    due_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    status: str
    last_payment_date: date | None


class EnsurePeriodsResponse(BaseModel):
    lease_id: int
    as_of: date
    created: list[str]


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request: PaymentRequest,
    services: LedgerServices = Depends(get_services),
) -> PaymentResponse:
    """Record a payment and allocate it to the tenant's rent periods."""
    payment, receipt = services.payments.record_payment(
        request.tenant_id,
        request.amount,
        request.payment_date,
        method=request.method,
        status=request.status,
    )
    return PaymentResponse(
        id=payment.id,
        tenant_id=payment.tenant_id,
        amount=receipt.amount,
        payment_date=payment.payment_date,
        method=payment.method,
        status=payment.status,
        allocation=AllocationReceiptResponse.from_receipt(receipt),
    )


@router.post("/payments/allocate", response_model=AllocationReceiptResponse)
def allocate_payment(
    request: AllocateRequest,
    services: LedgerServices = Depends(get_services),
) -> AllocationReceiptResponse:
    """Allocate an already recorded payment."""
    receipt = services.allocation.allocate(request.tenant_id, request.amount, request.payment_date)
    return AllocationReceiptResponse.from_receipt(receipt)


@router.get("/payments", response_model=list[PaymentHistoryItem])
def list_payments(services: LedgerServices = Depends(get_services)) -> list[PaymentHistoryItem]:
    """All payments, newest first, with tenant and property names."""
    return [PaymentHistoryItem.model_validate(r) for r in services.payments.payment_history()]


@router.get("/payments/tenant/{tenant_id}", response_model=list[PaymentHistoryItem])
def list_tenant_payments(
    tenant_id: int,
    services: LedgerServices = Depends(get_services),
) -> list[PaymentHistoryItem]:
    """Payment history of one tenant (empty list if none)."""
    return [
        PaymentHistoryItem.model_validate(r)
        for r in services.payments.payment_history(tenant_id=tenant_id)
    ]


@router.get("/payments/overdue-report", response_model=list[TenantArrearsResponse])
def overdue_report(
    as_of: date | None = None,
    services: LedgerServices = Depends(get_services),
) -> list[TenantArrearsResponse]:
    """Tenants with unpaid or partially paid rent periods up to as_of."""
    return [TenantArrearsResponse.from_arrears(e) for e in services.arrears.overdue_report(as_of)]


@router.post("/leases/{lease_id}/periods/ensure", response_model=EnsurePeriodsResponse)
def ensure_lease_periods(
    lease_id: int,
    as_of: date | None = None,
    services: LedgerServices = Depends(get_services),
) -> EnsurePeriodsResponse:
    """Materialize missing rent periods of a lease (safe to repeat)."""
    as_of = as_of or date.today()
    created = services.ledger.ensure_periods_for_lease_id(lease_id, as_of)
    return EnsurePeriodsResponse(lease_id=lease_id, as_of=as_of, created=[str(k) for k in created])


@router.get("/leases/{lease_id}/periods", response_model=list[RentPeriodResponse])
def list_lease_periods(
    lease_id: int,
    services: LedgerServices = Depends(get_services),
) -> list[RentPeriodResponse]:
    """All materialized rent periods of a lease, oldest first."""
    return [
        RentPeriodResponse(
            id=p.id,
            period=str(p.key),
            due_date=p.due_date,
            due_amount=p.due_amount,
            paid_amount=p.paid_amount,
            balance=p.balance,
            status=p.status.value,
            last_payment_date=p.last_payment_date,
        )
        for p in services.ledger.list_periods(lease_id)
    ]


__all__ = ["router", "get_services"]
