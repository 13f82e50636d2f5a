"""
FormSubmission model — raw intake record, kept verbatim for audit.

raw_data is never rewritten after insert; only the processing columns
(status, ai_processed, ai_response, lead_id) move.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, JSON, ForeignKey

from leadwell.database import Base, utcnow


class FormSubmission(Base):
    __tablename__ = 'form_submissions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_type = Column(Text, nullable=False, default='contact')
    raw_data = Column(JSON, nullable=False)
    source = Column(Text, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default='new')   # new/processed/spam/error
    ai_processed = Column(Boolean, default=False)
    ai_response = Column(JSON, nullable=True)
    lead_id = Column(Integer, ForeignKey('leads.id'), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
