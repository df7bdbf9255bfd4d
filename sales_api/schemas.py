# sales_api/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer

# Prices stay Decimal in Python and go out as JSON numbers
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

class TransactionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str
    price: Price
    category: str
    image: str
    sold: bool
    date_of_sale: datetime = Field(
        validation_alias=AliasChoices("date_of_sale", "dateOfSale"),
        serialization_alias="dateOfSale",
    )

class TransactionPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    records: List[TransactionRecord] = Field(alias="transactions")
    total: int
    page: int
    per_page: int = Field(alias="perPage")
    total_pages: int = Field(alias="totalPages")

class Statistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_sale: Price = Field(alias="totalSale")
    sold_items: int = Field(alias="soldItems")
    not_sold_items: int = Field(alias="notSoldItems")

class ChartEntry(BaseModel):
    """A histogram bucket or a category, with the number of records in it."""
    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(alias="_id")
    count: int

class CombinedView(BaseModel):
    statistics: Statistics
    barchart: List[ChartEntry]
    piechart: List[ChartEntry]

class InitResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    document_count: int = Field(alias="documentCount")

class ErrorBody(BaseModel):
    error: str
    details: Optional[Any] = None
