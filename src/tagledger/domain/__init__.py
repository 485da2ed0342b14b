"""Domain layer for tagledger application."""

# Services import the database layer, which imports domain.entities; load them
# lazily so importing an entity never pulls in the services.
_SERVICES = {
    "AccountService": "tagledger.domain.account",
    "TagService": "tagledger.domain.tag",
    "CurrencyService": "tagledger.domain.currency",
    "TagBalanceService": "tagledger.domain.tag_balance",
    "TransactionService": "tagledger.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
