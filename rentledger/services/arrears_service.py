"""Arrears reporting: who owes rent, how much, and since when.

Read-only. The report covers periods that already exist in the ledger up to the
as_of month; periods are never materialized here.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from rentledger.config import settings
from rentledger.models.rent_period import RentPeriodStatus
from rentledger.services.billing_calendar import PeriodKey
from rentledger.services.errors import LedgerError
from rentledger.services.ledger_service import RentPeriodLedger
from rentledger.services.ledger_store import RentPeriodSnapshot
from rentledger.services.lookup_service import (
    DirectoryLookup,
    LeaseLookup,
    LeaseTerms,
    TenantRef,
    display_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodArrears:
    """Outstanding amount of one rent period."""

    period_key: PeriodKey
    due_date: date
    expected: Decimal
    paid: Decimal
    balance: Decimal
    partial: bool
    days_overdue: int


@dataclass
class TenantArrears:
    """Overdue summary of one tenant."""

    tenant_id: int
    tenant_name: str
    property_name: str
    lease_id: int
    billing_mode: str
    due_day: int
    total_balance: Decimal
    period_count: int
    oldest_period: PeriodKey
    days_overdue: int
    last_payment_date: date | None
    periods: list[PeriodArrears] = field(default_factory=list)


class ArrearsReportService:
    """Builds per-tenant overdue summaries from the rent period ledger."""

    def __init__(
        self,
        ledger: RentPeriodLedger,
        leases: LeaseLookup,
        directory: DirectoryLookup,
        placeholder: str | None = None,
    ):
        """Initialize report service.

        Args:
            ledger: Rent period ledger (read only)
            leases: Lease lookup
            directory: Tenant/property lookup used for display names
            placeholder: Display value when a name cannot be resolved
        """
        self.ledger = ledger
        self.leases = leases
        self.directory = directory
        self.placeholder = placeholder or settings.unknown_placeholder

    def overdue_report(self, as_of: date | None = None) -> list[TenantArrears]:
        """Summarize outstanding rent per tenant as of a date.

        A tenant appears only when at least one of its periods up to the as_of
        month is unpaid or partially paid. Tenants whose lease or ledger cannot
        be read are skipped and logged; the rest of the report is still built.

        Args:
            as_of: Reporting date (default: today)

        Returns:
            TenantArrears entries in tenant order
        """
        as_of = as_of or date.today()
        cutoff = PeriodKey.of(as_of)

        report = []
        skipped = 0
        for tenant in self.directory.list_tenants():
            try:
                entry = self._tenant_arrears(tenant, as_of, cutoff)
            except LedgerError as e:
                skipped += 1
                logger.warning("Skipping tenant %d in overdue report: %s", tenant.id, e.message)
                continue
            if entry is not None:
                report.append(entry)

        logger.info(
            "Overdue report as of %s: %d tenants in arrears, %d skipped",
            as_of,
            len(report),
            skipped,
        )
        return report

    def _tenant_arrears(
        self, tenant: TenantRef, as_of: date, cutoff: PeriodKey
    ) -> TenantArrears | None:
        lease = self.leases.lease_for_tenant(tenant.id)
        outstanding = self.ledger.outstanding_periods(lease, through=cutoff)
        if not outstanding:
            return None

        periods = [self._period_arrears(p, as_of) for p in outstanding]
        return TenantArrears(
            tenant_id=tenant.id,
            tenant_name=tenant.full_name
            or display_name(self.directory.tenant_name, tenant.id, self.placeholder),
            property_name=display_name(
                self.directory.property_name,
                lease.property_id or tenant.property_id,
                self.placeholder,
            ),
            lease_id=lease.id,
            billing_mode=lease.billing_mode.value,
            due_day=lease.due_day,
            total_balance=sum((p.balance for p in periods), Decimal("0.00")),
            period_count=len(periods),
            oldest_period=periods[0].period_key,
            days_overdue=sum(p.days_overdue for p in periods),
            last_payment_date=self._last_payment_date(lease),
            periods=periods,
        )

    def _last_payment_date(self, lease: LeaseTerms) -> date | None:
        dates = [p.last_payment_date for p in self.ledger.list_periods(lease.id) if p.last_payment_date]
        return max(dates) if dates else None

    @staticmethod
    def _period_arrears(period: RentPeriodSnapshot, as_of: date) -> PeriodArrears:
        return PeriodArrears(
            period_key=period.key,
            due_date=period.due_date,
            expected=period.due_amount,
            paid=period.paid_amount,
            balance=period.balance,
            partial=period.status == RentPeriodStatus.PARTIAL,
            days_overdue=max((as_of - period.due_date).days, 0),
        )


__all__ = ["ArrearsReportService", "PeriodArrears", "TenantArrears"]
