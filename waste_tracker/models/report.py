from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, Float, String, Text, Uuid
from sqlalchemy.sql import func

from waste_tracker.models.base import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="Submitted", server_default="Submitted", index=True)
    # gps: both set or both null
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location_details = Column(JSON, nullable=True)
    photo_url = Column(String, nullable=True)
    reporter = Column(String, nullable=False, default="Anonymous", server_default="Anonymous")
    contact = Column(String, nullable=False, default="Not provided", server_default="Not provided")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
