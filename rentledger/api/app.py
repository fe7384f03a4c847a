"""FastAPI application exposing the rent ledger."""

import logging

from fastapi import FastAPI

from rentledger.api.errors import ledger_error_handler
from rentledger.api.ledger import router as ledger_router
from rentledger.config import settings
from rentledger.services.errors import LedgerError

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.api_title,
    description="Rent periods, payment allocation and arrears reporting",
    version=settings.api_version,
)

app.add_exception_handler(LedgerError, ledger_error_handler)
app.include_router(ledger_router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {"status": "ok"}


__all__ = ["app"]
