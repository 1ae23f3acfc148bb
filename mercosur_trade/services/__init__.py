"""
Trade Data Services

One function per tool; each takes a SQLAlchemy session on the read-only
relation store and returns a plain dict envelope.

Note: Imports are lazy to avoid circular import issues.
Use explicit imports from submodules when needed:
    from mercosur_trade.services.relation_resolver import get_data_transfer_rules
    from mercosur_trade.services.agreement_search import search_agreements
    from mercosur_trade.services.freshness import FreshnessService
"""

_EXPORTS = {
    "get_data_transfer_rules": "mercosur_trade.services.relation_resolver",
    "get_mutual_recognition": "mercosur_trade.services.relation_resolver",
    "check_digital_trade_obligations": "mercosur_trade.services.relation_resolver",
    "search_agreements": "mercosur_trade.services.agreement_search",
    "get_provision": "mercosur_trade.services.agreement_search",
    "get_trade_bloc_rules": "mercosur_trade.services.trade_blocs",
    "list_sources": "mercosur_trade.services.catalogue",
    "about": "mercosur_trade.services.catalogue",
    "check_data_freshness": "mercosur_trade.services.freshness",
    "FreshnessService": "mercosur_trade.services.freshness",
    "build_meta": "mercosur_trade.services.metadata",
}


def __getattr__(name):
    """Lazy import to avoid circular imports."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'mercosur_trade.services' has no attribute '{name}'")
    import importlib
    return getattr(importlib.import_module(module_name), name)
