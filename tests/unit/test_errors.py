"""Unit tests for ledger errors and their API representation."""

from datetime import date
from decimal import Decimal

import pytest

from rentledger.api.errors import error_response
from rentledger.services.allocation_service import AllocationReceipt
from rentledger.services.errors import (
    AllocationConflict,
    AllocationInvariantError,
    ConcurrentModification,
    InvalidPayment,
    LeaseNotFound,
    LedgerError,
    LookupUnavailable,
    StoreUnavailable,
)


@pytest.mark.parametrize(
    "error,status",
    [
        (LeaseNotFound(tenant_id=3), 404),
        (InvalidPayment("Payment amount must be positive, got 0.00"), 400),
        (ConcurrentModification(7, Decimal("500.00")), 409),
        (AllocationConflict("kept changing"), 409),
        (AllocationInvariantError("mismatch"), 500),
        (StoreUnavailable("db down"), 503),
        (LookupUnavailable("registry down"), 503),
    ],
)
def test_http_status(error, status):
    assert isinstance(error, LedgerError)
    assert error.http_status == status


def test_lease_not_found_messages():
    assert LeaseNotFound(tenant_id=3).message == "No lease found for tenant 3"
    assert LeaseNotFound(lease_id=9).message == "Lease 9 not found"


def test_error_response_body():
    body = error_response(LeaseNotFound(tenant_id=3))

    assert body == {"error": {"code": "lease_not_found", "message": "No lease found for tenant 3"}}


def test_conflict_body_reports_applied_and_unapplied():
    receipt = AllocationReceipt(
        tenant_id=3,
        lease_id=1,
        amount=Decimal("700.00"),
        payment_date=date(2024, 2, 10),
        remainder=Decimal("200.00"),
    )

    body = error_response(AllocationConflict("kept changing", partial_receipt=receipt))

    assert body["error"]["code"] == "allocation_conflict"
    assert body["error"]["applied"] == "0.00"
    assert body["error"]["unapplied"] == "200.00"
