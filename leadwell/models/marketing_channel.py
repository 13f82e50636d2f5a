from sqlalchemy import Column, Integer, Text, Boolean, DateTime

from leadwell.database import Base, utcnow


class MarketingChannel(Base):
    __tablename__ = 'marketing_channels'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    icon = Column(Text, nullable=False)
    active = Column(Boolean, default=True)
    conversion_rate = Column(Integer, nullable=True)  # percent
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
