from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from bagtag.models.base import Base


class EquipmentItem(Base):
    __tablename__ = "equipment_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(32), nullable=False)  # Driver | Fairway Wood | ... | Other
    brand = Column(String(120), nullable=False)
    model = Column(String(200), nullable=False)
    loft = Column(String(32), nullable=True)
    set_composition = Column(JSON, nullable=True)  # ["4", "5", ..., "PW"]
    shaft_make_model = Column(String(200), nullable=True)
    shaft_stiffness = Column(String(64), nullable=True)
    photo_url = Column(String(1024), nullable=True)
    receipt_url = Column(String(1024), nullable=True)
    purchase_date = Column(String(32), nullable=True)
    price = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    launch_data = Column(JSON, nullable=True)
    status = Column(String(16), nullable=False, default="Bag", server_default="Bag")
    trade_in_low = Column(Float, nullable=True)
    trade_in_high = Column(Float, nullable=True)
    last_trade_in_check = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
