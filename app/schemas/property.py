from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.common import Text, WholeNumber, max_length

PropertyName = Annotated[str, max_length(255)]
Zipcode = Annotated[Text, max_length(20)]


def _required_text(v: str | None, field: str) -> str:
    if v is None or not str(v).strip():
        raise ValueError(f"{field} is required")
    return str(v).strip()


class PropertyCreate(BaseModel):
    property_name: PropertyName
    address: str
    owner: str
    city: Text = None
    state: Text = None
    zipcode: Zipcode = None
    county: Text = None
    year: WholeNumber = None
    type: Text = None  # Residential | Commercial | Multi-Family | Land | ...
    status: Text = None  # Occupied | Vacant | Under Renovation | ...

    @field_validator("property_name", "address", "owner", mode="before")
    @classmethod
    def not_blank(cls, v, info):
        return _required_text(v, info.field_name)


class PropertyUpdate(BaseModel):
    property_name: PropertyName | None = None
    address: str | None = None
    owner: str | None = None
    city: Text = None
    state: Text = None
    zipcode: Zipcode = None
    county: Text = None
    year: WholeNumber = None
    type: Text = None
    status: Text = None

    # Only runs for fields present in the body
    @field_validator("property_name", "address", "owner", mode="before")
    @classmethod
    def not_blank(cls, v, info):
        return _required_text(v, info.field_name)


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    property_id: int
    property_name: PropertyName
    address: str
    owner: str
    city: str | None
    state: str | None
    zipcode: str | None
    county: str | None
    year: int | None
    type: str | None
    status: str | None
    lat: float | None
    lng: float | None
    geocoded_at: datetime | None
    created_at: datetime


class PropertyMarker(BaseModel):
    id: int
    name: str
    address: str
    city: str
    state: str
    zipcode: str
    lat: float | None
    lng: float | None


class GeocodeResult(BaseModel):
    updated_count: int
    ids: list[int]
