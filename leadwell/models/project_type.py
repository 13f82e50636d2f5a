from sqlalchemy import Column, Integer, Text, DateTime

from leadwell.database import Base, utcnow


class ProjectType(Base):
    __tablename__ = 'project_types'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    min_budget = Column(Integer, nullable=True)
    average_timeline = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
