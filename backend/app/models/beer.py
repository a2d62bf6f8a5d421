from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class BeerBatch(Base):
    __tablename__ = "beers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(140), nullable=False)
    style: Mapped[str] = mapped_column(String(80), nullable=False)
    original_gravity: Mapped[float] = mapped_column(Float, nullable=False)
    final_gravity: Mapped[float] = mapped_column(Float, nullable=False)
    brewed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    best_before_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    division: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    batch_size: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Planning")
    allergens: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    notes: Mapped[list[BeerNoteEntry]] = relationship(
        back_populates="beer",
        cascade="all, delete-orphan",
        order_by="BeerNoteEntry.position",
    )
    malts: Mapped[list[MaltAddition]] = relationship(
        back_populates="beer",
        cascade="all, delete-orphan",
        order_by="MaltAddition.position",
    )
    hops: Mapped[list[HopAddition]] = relationship(
        back_populates="beer",
        cascade="all, delete-orphan",
        order_by="HopAddition.position",
    )
    yeasts: Mapped[list[YeastAddition]] = relationship(
        back_populates="beer",
        cascade="all, delete-orphan",
        order_by="YeastAddition.position",
    )


class BeerNoteEntry(Base):
    __tablename__ = "beer_notes"

    beer_id: Mapped[str] = mapped_column(ForeignKey("beers.id", ondelete="CASCADE"), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    beer: Mapped[BeerBatch] = relationship(back_populates="notes")


class MaltAddition(Base):
    __tablename__ = "beer_malts"

    beer_id: Mapped[str] = mapped_column(ForeignKey("beers.id", ondelete="CASCADE"), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    batch_number: Mapped[str | None] = mapped_column(String(60), nullable=True)
    supplier: Mapped[str | None] = mapped_column(String(120), nullable=True)

    beer: Mapped[BeerBatch] = relationship(back_populates="malts")


class HopAddition(Base):
    __tablename__ = "beer_hops"

    beer_id: Mapped[str] = mapped_column(ForeignKey("beers.id", ondelete="CASCADE"), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    alpha_acid: Mapped[float | None] = mapped_column(Float, nullable=True)
    timing: Mapped[int | None] = mapped_column(Integer, nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(60), nullable=True)
    supplier: Mapped[str | None] = mapped_column(String(120), nullable=True)

    beer: Mapped[BeerBatch] = relationship(back_populates="hops")


class YeastAddition(Base):
    __tablename__ = "beer_yeasts"

    beer_id: Mapped[str] = mapped_column(ForeignKey("beers.id", ondelete="CASCADE"), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    yeast_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    temperature_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String(60), nullable=True)
    supplier: Mapped[str | None] = mapped_column(String(120), nullable=True)

    beer: Mapped[BeerBatch] = relationship(back_populates="yeasts")
