from sqlalchemy import Column, Integer, ForeignKey, Numeric, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class ProjectResource(Base):
    """Staffing commitment of a resource to a project."""

    __tablename__ = "project_resources"
    __table_args__ = (
        UniqueConstraint("project_id", "resource_id", name="unique_project_resource"),
        CheckConstraint("assigned_hours >= 0", name="ck_project_resources_assigned_hours"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assigned_hours = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)

    # Relationships
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    project = relationship("Project", back_populates="resource_assignments")

    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=False, index=True)
    resource = relationship("Resource", back_populates="project_assignments")

    @property
    def name(self):
        return self.resource.name

    @property
    def role(self):
        return self.resource.role

    @property
    def hourly_rate(self):
        return self.resource.hourly_rate
