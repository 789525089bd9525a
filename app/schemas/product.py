from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StrictInt, StringConstraints

ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
ProductDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=500)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: int
    stock: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProductCreate(BaseModel):
    name: ProductName
    description: ProductDescription
    price: NonNegativeInt
    stock: NonNegativeInt


class ProductUpdate(BaseModel):
    name: ProductName | None = None
    description: ProductDescription | None = None
    price: NonNegativeInt | None = None
    stock: NonNegativeInt | None = None
