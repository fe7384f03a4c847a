"""Assemble ledger services around one database session."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from rentledger.services.allocation_service import PaymentAllocationService
from rentledger.services.arrears_service import ArrearsReportService
from rentledger.services.ledger_service import RentPeriodLedger
from rentledger.services.ledger_store import SqlAlchemyLedgerStore
from rentledger.services.lookup_service import SqlAlchemyDirectoryLookup, SqlAlchemyLeaseLookup
from rentledger.services.payment_service import PaymentService


@dataclass
class LedgerServices:
    """Services sharing one unit of work."""

    ledger: RentPeriodLedger
    allocation: PaymentAllocationService
    arrears: ArrearsReportService
    payments: PaymentService


def build_ledger_services(db: Session) -> LedgerServices:
    """Create SQLAlchemy-backed ledger services for a session."""
    leases = SqlAlchemyLeaseLookup(db)
    directory = SqlAlchemyDirectoryLookup(db)
    ledger = RentPeriodLedger(SqlAlchemyLedgerStore(db), leases)
    allocation = PaymentAllocationService(ledger, leases)
    return LedgerServices(
        ledger=ledger,
        allocation=allocation,
        arrears=ArrearsReportService(ledger, leases, directory),
        payments=PaymentService(db, allocation, directory),
    )


__all__ = ["LedgerServices", "build_ledger_services"]
