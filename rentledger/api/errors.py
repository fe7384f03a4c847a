"""API error handling and response helpers."""

from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

from rentledger.services.errors import AllocationConflict, LedgerError


def error_response(error: LedgerError) -> Dict[str, Any]:
    """Create a standardized error response."""
    body: Dict[str, Any] = {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }
    if isinstance(error, AllocationConflict) and error.partial_receipt is not None:
        receipt = error.partial_receipt
        body["error"]["applied"] = str(receipt.total_applied)
        body["error"]["unapplied"] = str(receipt.remainder)
    return body


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Translate ledger exceptions into JSON responses with their HTTP status."""
    return JSONResponse(status_code=exc.http_status, content=error_response(exc))
