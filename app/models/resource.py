from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Resource(Base):
    """A person that can be staffed on projects and tasks."""

    __tablename__ = "resources"
    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="ck_resources_hourly_rate"),
        CheckConstraint("availability BETWEEN 0 AND 100", name="ck_resources_availability"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    role = Column(String(100), nullable=False, index=True)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    availability = Column(Integer, nullable=False, default=100)  # percent

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    project_assignments = relationship(
        "ProjectResource", back_populates="resource", cascade="all, delete-orphan", passive_deletes=True
    )
    task_assignments = relationship(
        "TaskResource", back_populates="resource", cascade="all, delete-orphan", passive_deletes=True
    )
