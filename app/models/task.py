from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_tasks_dates"),
        CheckConstraint("estimated_hours >= 0", name="ck_tasks_estimated_hours"),
        CheckConstraint("hours_spent >= 0", name="ck_tasks_hours_spent"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(Enum(TaskStatus), default=TaskStatus.PENDING, nullable=False)
    priority = Column(Enum(TaskPriority), default=TaskPriority.MEDIUM, nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    estimated_hours = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    hours_spent = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)

    # Relationships
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    project = relationship("Project", back_populates="tasks")

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    resource_assignments = relationship(
        "TaskResource",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskResource.id",
    )

    @property
    def project_name(self):
        return self.project.name if self.project else None

    @property
    def resources(self):
        return self.resource_assignments
