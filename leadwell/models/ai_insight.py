"""
AiInsight model — write-once dashboard observation; only `read` changes later.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime

from leadwell.database import Base, utcnow


class AiInsight(Base):
    __tablename__ = 'ai_insights'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Text, nullable=False)       # quality/schedule/trend/source/opportunity
    icon = Column(Text, nullable=False)
    action = Column(Text, nullable=True)
    action_url = Column(Text, nullable=True)
    priority = Column(Text, default='medium')
    read = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
