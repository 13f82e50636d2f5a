"""
Call model — a scheduled conversation with exactly one lead.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, JSON, ForeignKey

from leadwell.database import Base, utcnow


class Call(Base):
    __tablename__ = 'calls'

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey('leads.id'), nullable=False, index=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, default=30)           # minutes
    title = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    completed = Column(Boolean, default=False)
    attendees = Column(JSON, default=list)           # [{id, name, role}, ...]
    ai_scheduled = Column(Boolean, default=False)
    ai_summary = Column(Text, nullable=True)
    follow_up_needed = Column(Boolean, default=False)
    follow_up_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
