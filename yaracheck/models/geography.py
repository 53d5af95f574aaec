"""
YaraCheck - Geography Models

Countries and provinces used to scope admin report queries.
"""

import uuid
from typing import List

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yaracheck.models.base import BaseModel


class Country(BaseModel):
    """Country a report or admin is attached to."""

    __tablename__ = "countries"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(3), nullable=False, unique=True)

    provinces: Mapped[List["Province"]] = relationship(
        "Province",
        back_populates="country",
        cascade="all, delete-orphan",
    )


class Province(BaseModel):
    """Province (state/region) inside a country."""

    __tablename__ = "provinces"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    country: Mapped["Country"] = relationship("Country", back_populates="provinces")
