"""Domain layer for accountbook application."""

# Services are imported lazily: database.base imports domain.entities, and
# eager service imports here would make that a circular import.
_SERVICES = {
    "ChartOfAccountsService": "accountbook.domain.chart",
    "ExchangeRateService": "accountbook.domain.currency",
    "JournalService": "accountbook.domain.journal",
    "BalanceService": "accountbook.domain.balances",
    "AgingService": "accountbook.domain.aging",
    "BankAccountService": "accountbook.domain.bank",
    "ReconciliationService": "accountbook.domain.reconciliation",
    "AutoPostingService": "accountbook.domain.postings",
    "ReportService": "accountbook.domain.reports",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
