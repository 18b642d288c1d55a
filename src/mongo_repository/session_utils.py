"""Session helpers for MongoDB (Motor vs mock compatibility)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .options import QueryOptions


def session_in_transaction(session: Any) -> bool:
    """Return whether the session is in an active transaction.

    Motor's ClientSession uses ``in_transaction`` as a property; mocks may use a method.
    """
    in_txn = getattr(session, "in_transaction", False)
    return in_txn() if callable(in_txn) else bool(in_txn)


def session_kwargs(options: QueryOptions | None) -> dict[str, Any]:
    """Return ``{"session": ...}`` when ``options`` carries a session, else ``{}``."""
    if options is None or options.session is None:
        return {}
    return {"session": options.session}
