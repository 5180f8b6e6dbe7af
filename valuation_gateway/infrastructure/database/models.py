"""SQLAlchemy ORM models for the asset register and stored schedules"""

import uuid
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, Date, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from valuation_gateway.config import settings

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class FixedAsset(Base):
    """Fixed asset owned by a business"""

    __tablename__ = "fixed_asset"

    id = Column(String(36), primary_key=True, default=_new_id)
    business_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="equipment")
    acquisition_date = Column(Date, nullable=False)
    acquisition_cost = Column(Numeric(14, 2), nullable=False)
    salvage_value = Column(Numeric(14, 2), nullable=False, default=0)
    useful_life = Column(Integer, nullable=False)
    period_months = Column(Integer, nullable=False, default=settings.default_period_months)
    depreciation_method = Column(Text, nullable=False, default="straight_line")
    total_expected_units = Column(Numeric(18, 4), nullable=True)
    declining_rate = Column(Numeric(7, 4), nullable=True)
    current_book_value = Column(Numeric(14, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    schedule_entries = relationship("DepreciationScheduleEntry", back_populates="asset", cascade="all, delete-orphan")


class DepreciationScheduleEntry(Base):
    """One stored period of a generated schedule"""

    __tablename__ = "depreciation_schedule_entry"
    __table_args__ = (
        UniqueConstraint("asset_id", "method", "as_of", "period_index", name="uq_schedule_period"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    asset_id = Column(String(36), ForeignKey("fixed_asset.id", ondelete="CASCADE"), nullable=False, index=True)
    business_id = Column(Text, nullable=False, index=True)
    method = Column(Text, nullable=False)
    as_of = Column(Date, nullable=True)
    period_index = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    opening_book_value = Column(Numeric(14, 2), nullable=False)
    depreciation_amount = Column(Numeric(14, 2), nullable=False)
    accumulated_depreciation = Column(Numeric(14, 2), nullable=False)
    closing_book_value = Column(Numeric(14, 2), nullable=False)
    units = Column(Numeric(18, 4), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    asset = relationship("FixedAsset", back_populates="schedule_entries")
