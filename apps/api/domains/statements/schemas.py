"""Pydantic schemas for the statements domain.

The import config keeps the camelCase wire names used by the upload UI
(``headerRowIndex``, ``columnMapping``, ``amountFormat``); snake_case names
are accepted too.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from packages.statement_engine import (
    AmountFormat,
    ColumnMapping,
    ImportConfig,
    ParsedTransaction,
    StatementAnalysis,
)


class ColumnMappingSchema(BaseModel):
    """Column index per semantic role; omitted roles are unmapped."""

    date: Optional[int] = Field(default=None, ge=0)
    description: Optional[int] = Field(default=None, ge=0)
    merchant: Optional[int] = Field(default=None, ge=0)
    category: Optional[int] = Field(default=None, ge=0)
    amount: Optional[int] = Field(default=None, ge=0)
    debit: Optional[int] = Field(default=None, ge=0)
    credit: Optional[int] = Field(default=None, ge=0)

    def to_mapping(self) -> ColumnMapping:
        return ColumnMapping(**self.model_dump())

    @classmethod
    def from_mapping(cls, mapping: ColumnMapping) -> "ColumnMappingSchema":
        return cls(**mapping.to_dict())


class ImportConfigSchema(BaseModel):
    """Finalized import configuration as posted by the client."""

    model_config = ConfigDict(populate_by_name=True)

    header_row_index: int = Field(alias="headerRowIndex", ge=0)
    column_mapping: ColumnMappingSchema = Field(
        default_factory=ColumnMappingSchema, alias="columnMapping"
    )
    amount_format: AmountFormat = Field(
        default=AmountFormat.UNIFIED, alias="amountFormat"
    )

    def to_config(self) -> ImportConfig:
        return ImportConfig(
            header_row_index=self.header_row_index,
            column_mapping=self.column_mapping.to_mapping(),
            amount_format=self.amount_format,
        )


class AnalyzeResponse(BaseModel):
    """Suggested configuration and preview for one uploaded statement."""

    header_row_index: int
    header_cells: list[str]
    preview_rows: list[list[str]]
    suggested_mapping: ColumnMappingSchema
    suggested_amount_format: AmountFormat
    total_rows: int

    @classmethod
    def from_analysis(cls, analysis: StatementAnalysis) -> "AnalyzeResponse":
        return cls(
            header_row_index=analysis.header_row_index,
            header_cells=analysis.header_cells,
            preview_rows=analysis.preview_rows,
            suggested_mapping=ColumnMappingSchema.from_mapping(analysis.suggested_mapping),
            suggested_amount_format=analysis.suggested_amount_format,
            total_rows=analysis.total_rows,
        )


class TransactionOut(BaseModel):
    """A normalized transaction; positive amounts are inflows."""

    amount: Decimal
    transaction_date: date
    description: Optional[str] = None
    merchant: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_transaction(cls, txn: ParsedTransaction) -> "TransactionOut":
        return cls(
            amount=txn.amount,
            transaction_date=txn.transaction_date,
            description=txn.description,
            merchant=txn.merchant,
            category=txn.category,
        )


class ImportResponse(BaseModel):
    """Response from a statement import."""

    transactions: list[TransactionOut]
    count: int
