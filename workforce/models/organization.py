"""SQLAlchemy models for departments, employees and projects."""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.data.records import ProjectPriority, ProjectStatus
from workforce.models.base import Base, utcnow


project_team_members = Table(
    "project_team_members",
    Base.metadata,
    Column(
        "project_id",
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "employee_id",
        String(36),
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Department(Base):
    """
    Organizational department.

    Deleting a department is rejected by the store while employees still
    reference it; removing those employees first is the caller's job.
    """

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    employees: Mapped[List["Employee"]] = relationship(
        "Employee", back_populates="department", passive_deletes="all"
    )

    __table_args__ = (
        Index("idx_departments_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name='{self.name}')>"


class Employee(Base):
    """Employee belonging to exactly one department."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    department_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    department: Mapped["Department"] = relationship(
        "Department", back_populates="employees"
    )
    projects: Mapped[List["Project"]] = relationship(
        "Project",
        secondary=project_team_members,
        back_populates="team_members",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_employees_department_id", "department_id"),
    )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, email='{self.email}')>"


class Project(Base):
    """Project staffed by a team of employees."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus, name="project_status", native_enum=False, length=20),
        nullable=False,
        default=ProjectStatus.ACTIVE,
    )
    priority: Mapped[ProjectPriority] = mapped_column(
        SAEnum(ProjectPriority, name="project_priority", native_enum=False, length=20),
        nullable=False,
        default=ProjectPriority.MEDIUM,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    budget: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    team_members: Mapped[List["Employee"]] = relationship(
        "Employee",
        secondary=project_team_members,
        back_populates="projects",
        order_by="Employee.name",
    )

    __table_args__ = (
        CheckConstraint("budget > 0", name="budget_positive"),
        Index("idx_projects_status", "status"),
        Index("idx_projects_priority", "priority"),
        Index("idx_projects_dates", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}', status={self.status})>"
