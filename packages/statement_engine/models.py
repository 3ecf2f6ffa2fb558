"""
Value types shared by every stage of the statement engine.

Grid rows are plain lists of cell strings; everything else is a frozen
dataclass so a configuration cannot drift once an import has started.
"""

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

Row = List[str]
Grid = List[Row]


class AmountFormat(str, Enum):
    """Sign/column convention a statement uses for money movement."""

    UNIFIED = "unified"  # positive = inflow
    UNIFIED_REVERSE = "unified_reverse"  # positive = outflow (credit cards)
    SEPARATE = "separate"  # debit and credit magnitude columns


class SourceFormat(str, Enum):
    """Container format of the raw input."""

    DELIMITED_TEXT = "delimited-text"
    SPREADSHEET_BINARY = "spreadsheet-binary"


@dataclass(frozen=True)
class ColumnMapping:
    """Column index for each semantic role, or ``None`` when unmapped."""

    date: Optional[int] = None
    description: Optional[int] = None
    merchant: Optional[int] = None
    category: Optional[int] = None
    amount: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None

    def __post_init__(self):
        for f in fields(self):
            index = getattr(self, f.name)
            if index is not None and index < 0:
                raise ValueError(f"Column index for {f.name} must be >= 0, got {index}")

    @classmethod
    def roles(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnMapping":
        """Build a mapping from a JSON-shaped dict; unknown keys are ignored."""
        values = {}
        for role in cls.roles():
            index = data.get(role)
            values[role] = None if index is None else int(index)
        return cls(**values)

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {role: getattr(self, role) for role in self.roles()}


@dataclass(frozen=True)
class ImportConfig:
    """Finalized configuration consumed once by the record assembler."""

    header_row_index: int
    column_mapping: ColumnMapping = field(default_factory=ColumnMapping)
    amount_format: AmountFormat = AmountFormat.UNIFIED

    def __post_init__(self):
        if self.header_row_index < 0:
            raise ValueError(
                f"header_row_index must be >= 0, got {self.header_row_index}"
            )
        # Accept plain strings for the format, e.g. straight from JSON.
        object.__setattr__(self, "amount_format", AmountFormat(self.amount_format))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportConfig":
        """
        Build a config from the wire shape::

            {"headerRowIndex": 0,
             "columnMapping": {"date": 0, "amount": 2, ...},
             "amountFormat": "unified"}
        """
        return cls(
            header_row_index=int(data["headerRowIndex"]),
            column_mapping=ColumnMapping.from_dict(data.get("columnMapping") or {}),
            amount_format=AmountFormat(data.get("amountFormat", AmountFormat.UNIFIED)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headerRowIndex": self.header_row_index,
            "columnMapping": self.column_mapping.to_dict(),
            "amountFormat": self.amount_format.value,
        }


@dataclass(frozen=True)
class ParsedTransaction:
    """Canonical transaction record, one per accepted input row."""

    amount: Decimal
    transaction_date: date
    description: Optional[str] = None
    merchant: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": str(self.amount),
            "description": self.description,
            "merchant": self.merchant,
            "category": self.category,
            "transactionDate": self.transaction_date.isoformat(),
        }


@dataclass(frozen=True)
class StatementAnalysis:
    """Suggested configuration plus preview material for operator review."""

    header_row_index: int
    header_cells: List[str]
    preview_rows: Grid
    suggested_mapping: ColumnMapping
    suggested_amount_format: AmountFormat
    total_rows: int

    def suggested_config(self) -> ImportConfig:
        return ImportConfig(
            header_row_index=self.header_row_index,
            column_mapping=self.suggested_mapping,
            amount_format=self.suggested_amount_format,
        )
