"""
Lead model — one row per prospective customer. Never hard-deleted.

Created by the intake pipeline or manually through the API; the AI columns
record what the model concluded when it qualified the lead.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, Index

from leadwell.database import Base, utcnow


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    company = Column(Text, nullable=True)
    project_type = Column(Text, nullable=False)
    budget = Column(Integer, nullable=True)          # dollars
    timeline = Column(Text, nullable=True)
    source = Column(Text, nullable=False)            # marketing channel name
    source_icon = Column(Text, nullable=True)
    score = Column(Integer, default=0)               # 0-100
    status = Column(Text, nullable=False, default='new')
    notes = Column(Text, nullable=True)
    ai_qualified = Column(Boolean, nullable=True)
    ai_qualification_reason = Column(Text, nullable=True)
    ai_processed = Column(Boolean, default=False)
    ai_analysis = Column(Text, nullable=True)
    assigned_to = Column(Integer, ForeignKey('users.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_leads_created_at', 'created_at'),
    )
