from pydantic import BaseModel, Field
from typing import Any, Optional


class CreateReview(BaseModel):
    # range is enforced by the rating aggregator so it answers InvalidRating
    rating: Any
    comment: Optional[str] = Field(None, max_length=1000)
