"""ORM mapping of the two tables the extraction process shares with us.

Timestamps are stored as naive UTC.
"""
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from po_review.core.prompt_rule import PromptRule
from po_review.core.purchase_order import PurchaseOrderRecord


def naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class PurchaseOrderRow(Base):
    __tablename__ = "FinalPOData"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pdf_name: Mapped[str] = mapped_column("pdfName", String, index=True)
    po_number: Mapped[str | None] = mapped_column("poNumber", String, nullable=True)
    header_output: Mapped[dict | None] = mapped_column("finalSOHeaderOutput", JSON, nullable=True)
    line_items_output: Mapped[list | None] = mapped_column("finalLinesOutput", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, index=True)

    def to_record(self) -> PurchaseOrderRecord:
        return PurchaseOrderRecord(
            pdf_name=self.pdf_name,
            po_number=self.po_number,
            created_at=self.created_at,
            header_output=self.header_output,
            line_items_output=self.line_items_output,
        )

    @classmethod
    def from_record(cls, record: PurchaseOrderRecord) -> "PurchaseOrderRow":
        return cls(
            pdf_name=record.pdf_name,
            po_number=record.po_number,
            created_at=naive_utc(record.created_at),
            header_output=(
                record.header_output.model_dump(mode="json", by_alias=True)
                if record.header_output is not None else None
            ),
            line_items_output=(
                [line.model_dump(mode="json", by_alias=True) for line in record.line_items_output]
                if record.line_items_output is not None else None
            ),
        )


class PromptRuleRow(Base):
    __tablename__ = "promptRules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prompt: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime)

    def to_rule(self) -> PromptRule:
        return PromptRule(
            id=self.id,
            prompt=self.prompt,
            created_at=self.created_at.replace(tzinfo=timezone.utc),
            updated_at=self.updated_at.replace(tzinfo=timezone.utc),
        )
