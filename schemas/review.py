from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

# ids are stored as BIGINT
MAX_ID = 2**63 - 1


class ReviewRequest(BaseModel):
    user_id: str | None = Field(None, max_length=100)
    order_id: int | None = Field(None, ge=0, le=MAX_ID)
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=500)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReviewUpdate(BaseModel):
    user_id: str | None = Field(None, max_length=100)
    order_id: int | None = Field(None, ge=0, le=MAX_ID)
    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=500)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, v: int | None) -> int:
        # omit rating to keep it; null is never a valid rating
        if v is None:
            raise ValueError("rating may not be null")
        return v


class ReviewResponse(BaseModel):
    id: int
    user_id: str | None = None
    order_id: int | None = None
    rating: int
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
