"""Exception classes for the rent ledger.

Every error carries a machine-readable code and the HTTP status the API layer
responds with.
"""


class LedgerError(Exception):
    """Base exception for ledger errors."""

    code = "ledger_error"
    http_status = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class LeaseNotFound(LedgerError):
    """No lease exists for the tenant (or lease id) given by the caller."""

    code = "lease_not_found"
    http_status = 404

    def __init__(self, tenant_id: int | None = None, lease_id: int | None = None):
        self.tenant_id = tenant_id
        self.lease_id = lease_id
        if lease_id is not None:
            message = f"Lease {lease_id} not found"
        else:
            message = f"No lease found for tenant {tenant_id}"
        super().__init__(message)


class InvalidPayment(LedgerError):
    """Payment amount is not a positive number."""

    code = "invalid_payment"
    http_status = 400


class ConcurrentModification(LedgerError):
    """A rent period balance changed between read and conditional write."""

    code = "concurrent_modification"
    http_status = 409

    def __init__(self, period_id: int, expected_balance):
        self.period_id = period_id
        self.expected_balance = expected_balance
        super().__init__(
            f"Rent period {period_id} no longer has balance {expected_balance}"
        )


class AllocationConflict(LedgerError):
    """Concurrent-update retries exhausted; the caller should retry the allocation.

    partial_receipt holds the period updates that did commit before giving up.
    """

    code = "allocation_conflict"
    http_status = 409

    def __init__(self, message: str, partial_receipt=None):
        self.partial_receipt = partial_receipt
        super().__init__(message)


class AllocationInvariantError(LedgerError):
    """Applied amounts plus remainder do not add up to the payment amount."""

    code = "allocation_invariant"


class StoreUnavailable(LedgerError):
    """The ledger database could not be read or written."""

    code = "store_unavailable"
    http_status = 503


class LookupUnavailable(LedgerError):
    """A tenant/property/lease lookup service failed."""

    code = "lookup_unavailable"
    http_status = 503


__all__ = [
    "LedgerError",
    "LeaseNotFound",
    "InvalidPayment",
    "ConcurrentModification",
    "AllocationConflict",
    "AllocationInvariantError",
    "StoreUnavailable",
    "LookupUnavailable",
]
