"""
Vendor inbox decision lifecycle.

A vendor product starts with no decision. An admin can stage it for import
or skip it, and may change their mind between those two. Only the import
flow marks it imported, and an imported item stays imported.
"""

from enum import Enum
from typing import Any, Optional

from ..exceptions import InvalidDecisionTransition


class ImportDecision(str, Enum):
    NONE = "none"
    STAGED = "staged"
    SKIPPED = "skipped"
    IMPORTED = "imported"


ADMIN_DECISIONS = frozenset({ImportDecision.STAGED, ImportDecision.SKIPPED})


def coerce_decision(value: Optional[str]) -> ImportDecision:
    """Map a stored value (NULL means no decision yet) to the enum."""
    if value is None or value == "":
        return ImportDecision.NONE
    return ImportDecision(value)


def check_transition(
    current: Optional[str],
    target: str,
    via_import: bool = False,
    item_id: Any = None,
) -> bool:
    """
    Validate a decision change.

    Returns:
        True when the row must be written, False when it already holds the
        target decision.

    Raises:
        InvalidDecisionTransition: if the change is not allowed
    """
    current_decision = coerce_decision(current)
    target_decision = ImportDecision(target)

    if current_decision == target_decision:
        return False

    if current_decision == ImportDecision.IMPORTED:
        raise InvalidDecisionTransition(current_decision.value, target_decision.value, item_id)

    if target_decision == ImportDecision.IMPORTED:
        if via_import:
            return True
        raise InvalidDecisionTransition(current_decision.value, target_decision.value, item_id)

    if target_decision in ADMIN_DECISIONS:
        return True

    raise InvalidDecisionTransition(current_decision.value, target_decision.value, item_id)
