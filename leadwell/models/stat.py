"""
Stat model — named dashboard metric snapshot, recomputed outside this service.
"""
from sqlalchemy import Column, Integer, Text, Date, DateTime

from leadwell.database import Base, utcnow


class Stat(Base):
    __tablename__ = 'stats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    value = Column(Text, nullable=False)
    change_percentage = Column(Integer, nullable=True)
    icon = Column(Text, nullable=False)
    icon_bg = Column(Text, nullable=False)
    icon_color = Column(Text, nullable=False)
    period = Column(Text, nullable=False, default='week')
    date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
