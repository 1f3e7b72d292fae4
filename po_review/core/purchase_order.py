from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Amounts arrive as strings from the extractor ("100.00"), occasionally as numbers.
Amount = str | int | float | None


class LineItem(BaseModel):
    """One extracted line of a purchase order."""

    # Extractors emit identifiers and numbers as JSON numbers as often as strings.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    item_no: str | None = None
    code: str | None = None
    item_description: str | None = None
    po_item_number: str | int | None = None
    po_description: str | None = None
    quantity: int | float | str | None = None
    unit_price: int | float | str | None = Field(
        default=None,
        validation_alias=AliasChoices("unitPrice", "unitprice", "unit_price"),
        serialization_alias="unitPrice",
    )
    unit_of_measure_code: str | None = None
    shipment_date: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_json_envelope(cls, data):
        # Extractor rows look like {"json": {...}, "pairedItem": {"item": 0}}
        if isinstance(data, dict) and isinstance(data.get("json"), dict):
            return data["json"]
        return data


class SalesOrderHeader(BaseModel):
    """Order-level fields extracted for a purchase order."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    customer_id: str | None = None
    customer_number: str | None = None
    customer_name: str | None = None
    order_date: str | None = None
    posting_date: str | None = None
    bill_to_name: str | None = None
    bill_to_customer_number: str | None = None
    ship_to_name: str | None = None
    bill_to_address_line1: str | None = None
    ship_to_address_line1: str | None = None
    sell_to_address_line1: str | None = None
    sell_to_city: str | None = None
    currency_code: str | None = None
    prices_include_tax: bool | None = None
    payment_terms: str | None = None
    shipment_method: str | None = None
    salesperson: str | None = None
    requested_delivery_date: str | None = None
    total_amount_excluding_tax: Amount = None
    total_tax_amount: Amount = None
    total_amount_including_tax: Amount = None


class PurchaseOrderRecord(BaseModel):
    """A purchase order as written by the extraction process.

    Header and line items are optional: a missing section is a data defect
    reported by the classifier, not a validation failure.
    """

    model_config = ConfigDict(populate_by_name=True)

    pdf_name: str = Field(validation_alias=AliasChoices("pdfName", "pdf_name"))
    po_number: str | None = Field(default=None, validation_alias=AliasChoices("poNumber", "po_number"))
    created_at: datetime = Field(validation_alias=AliasChoices("createdAt", "created_at"))
    header_output: SalesOrderHeader | None = Field(
        default=None,
        validation_alias=AliasChoices("headerOutput", "finalSOHeaderOutput", "header_output"),
    )
    line_items_output: list[LineItem] | None = Field(
        default=None,
        validation_alias=AliasChoices("lineItemsOutput", "finalLinesOutput", "line_items_output"),
    )

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
