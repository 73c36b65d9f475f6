from datetime import datetime, timezone

from database import Base
from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    __tablename__ = "reviews"

    # sqlite only autoincrements INTEGER PRIMARY KEY, which is already 64-bit there
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True
    )
    order_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    user_id: Mapped[str | None] = mapped_column(String(100))
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        CheckConstraint("rating > 0 AND rating < 6", name="ck_reviews_rating_1_5"),
        # one review per user per order
        UniqueConstraint("order_id", "user_id", name="uq_reviews_order_user"),
    )
