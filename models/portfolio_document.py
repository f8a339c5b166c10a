from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


class PortfolioDocumentRow(Base):
    """The whole portfolio document, stored and replaced as one JSON body."""

    __tablename__ = "portfolio_documents"

    id: Mapped[int] = mapped_column(primary_key=True)
    body: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
