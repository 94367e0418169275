from pydantic import BaseModel, Field
from typing import Literal, Optional


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    availability: Literal["available", "not-available"]
    price: float = Field(..., gt=0)


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    availability: Optional[Literal["available", "not-available"]] = None
    price: Optional[float] = Field(None, gt=0)
