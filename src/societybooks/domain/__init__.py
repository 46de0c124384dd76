"""Domain layer for societybooks application."""

# Services are resolved lazily so the database layer can import entities and
# errors from this package without a circular import.
_SERVICES = {
    "SocietyService": "societybooks.domain.society",
    "AccountHeadService": "societybooks.domain.account_head",
    "CashBookService": "societybooks.domain.cashbook",
    "BalanceService": "societybooks.domain.balance",
    "ReportMappingService": "societybooks.domain.report_mapping",
    "ReportService": "societybooks.domain.reports",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
