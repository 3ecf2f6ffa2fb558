"""
Column role suggestion from header text.

Roles are tried in a fixed order for every header cell; the first role that
is still unassigned and whose keywords match claims the column. The order is
significant: "Posting Date" must land on the date role before the credit
rule's "in" keyword ever sees it.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .header_detector import normalize_header_cell
from .models import AmountFormat, ColumnMapping


@dataclass(frozen=True)
class RoleRule:
    role: str
    contains: Tuple[str, ...]
    exact: Tuple[str, ...] = ()

    def matches(self, normalized: str) -> bool:
        if normalized in self.exact:
            return True
        return any(keyword in normalized for keyword in self.contains)


ROLE_RULES: Tuple[RoleRule, ...] = (
    RoleRule("date", ("date", "posted", "posting")),
    RoleRule(
        "description",
        ("description", "transaction", "details", "memo", "note", "reference"),
    ),
    RoleRule("amount", ("amount",), exact=("amt",)),
    RoleRule("debit", ("debit", "withdrawal", "out")),
    RoleRule("credit", ("credit", "deposit", "in")),
    RoleRule("merchant", ("merchant", "payee", "vendor", "store", "company")),
    RoleRule("category", ("category", "type", "class")),
)


def classify_column(
    header: str, assigned: Dict[str, int], rules: Sequence[RoleRule] = ROLE_RULES
) -> Optional[str]:
    """Return the role ``header`` should take given roles already assigned."""
    normalized = normalize_header_cell(header)
    if not normalized:
        return None
    for rule in rules:
        if rule.role not in assigned and rule.matches(normalized):
            return rule.role
    return None


def suggest_mapping(header_cells: Sequence[str]) -> ColumnMapping:
    """Suggest a column mapping for a header row.

    Best effort only: the suggestion is meant to be reviewed and edited by an
    operator before it is frozen into an ImportConfig.
    """
    assigned: Dict[str, int] = {}
    for index, header in enumerate(header_cells):
        role = classify_column(header, assigned)
        if role is not None:
            assigned[role] = index
    return ColumnMapping(**assigned)


def suggest_amount_format(mapping: ColumnMapping) -> AmountFormat:
    """Separate debit/credit columns win only when there is no unified amount."""
    has_split_columns = mapping.debit is not None or mapping.credit is not None
    if mapping.amount is None and has_split_columns:
        return AmountFormat.SEPARATE
    return AmountFormat.UNIFIED
