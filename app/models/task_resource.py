from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class TaskResource(Base):
    __tablename__ = "task_resources"
    __table_args__ = (
        UniqueConstraint("task_id", "resource_id", name="unique_task_resource"),
        CheckConstraint("assigned_hours IS NULL OR assigned_hours >= 0", name="ck_task_resources_assigned_hours"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Optional metadata, not used by any cost aggregate
    assigned_hours = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Relationships
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    task = relationship("Task", back_populates="resource_assignments")

    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=False, index=True)
    resource = relationship("Resource", back_populates="task_assignments")

    @property
    def name(self):
        return self.resource.name

    @property
    def role(self):
        return self.resource.role

    @property
    def hourly_rate(self):
        return self.resource.hourly_rate
