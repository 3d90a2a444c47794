from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import DateOnly, Money, Text, max_length, reject_null

Notes = Annotated[Text, max_length(255)]
TransactionType = Annotated[Text, max_length(100)]


class TransactionCreate(BaseModel):
    # The entry form posts amount/date/type; the edit grid uses the column names
    property_id: int
    transaction_amount: Money = Field(validation_alias=AliasChoices("transaction_amount", "amount"))
    transaction_date: DateOnly = Field(validation_alias=AliasChoices("transaction_date", "date"))
    transaction_type: TransactionType = Field(default=None, validation_alias=AliasChoices("transaction_type", "type"))
    notes: Notes = None

    @field_validator("transaction_amount", "transaction_date")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class TransactionUpdate(BaseModel):
    transaction_amount: Money = Field(default=None, validation_alias=AliasChoices("transaction_amount", "amount"))
    transaction_date: DateOnly = Field(default=None, validation_alias=AliasChoices("transaction_date", "date"))
    transaction_type: TransactionType = Field(default=None, validation_alias=AliasChoices("transaction_type", "type"))
    notes: Notes = None

    @field_validator("transaction_amount", "transaction_date")
    @classmethod
    def not_null(cls, v, info):
        return reject_null(v, info.field_name)


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: int
    property_id: int
    transaction_amount: Decimal
    transaction_date: date
    transaction_type: str | None
    notes: str | None
