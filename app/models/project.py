from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class ProjectStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_projects_dates"),
        CheckConstraint("estimated_hours >= 0", name="ck_projects_estimated_hours"),
        CheckConstraint("estimated_cost >= 0", name="ck_projects_estimated_cost"),
        CheckConstraint("budgeted_cost IS NULL OR budgeted_cost >= 0", name="ck_projects_budgeted_cost"),
        CheckConstraint("actual_cost >= 0", name="ck_projects_actual_cost"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(Enum(ProjectStatus), default=ProjectStatus.PENDING, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    estimated_hours = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    estimated_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    budgeted_cost = Column(Numeric(12, 2, asdecimal=False), nullable=True)  # NULL means not set yet
    actual_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)

    # Relationships
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    client = relationship("Client", back_populates="projects")

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")
    resource_assignments = relationship(
        "ProjectResource",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectResource.id",
    )

    @property
    def client_name(self):
        return self.client.name if self.client else None

    @property
    def resources(self):
        return self.resource_assignments
