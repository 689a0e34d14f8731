"""
Student model.

Students are owned by the wider student records system; this service keeps a
local copy so role assignments can update their posts and office flags.
"""
from sqlalchemy import String, Boolean, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Student(Base, TimestampMixin):
    """
    Student with denormalized office state.
    
    `posts`, `is_executive` and `is_senator` are a cache of the role ledger and
    are only written by the assignment coordinator.
    """
    __tablename__ = "students"
    
    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    matric_number: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str | None] = mapped_column(String(3), nullable=True)
    
    # Office flags
    is_executive: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_senator: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    
    # Optimistic concurrency counter, bumped on every flush that updates the row
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    
    posts: Mapped[list["StudentPost"]] = relationship(
        "StudentPost",
        order_by="StudentPost.id",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
    
    def __repr__(self) -> str:
        return f"<Student(id={self.id}, matric_number={self.matric_number!r})>"


class StudentPost(Base):
    """A post held by a student, e.g. "Executive - Treasurer" for 2024/25."""
    __tablename__ = "student_posts"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    academic_session: Mapped[str] = mapped_column(String(9), nullable=False)
    
    def __repr__(self) -> str:
        return f"<StudentPost(title={self.title!r}, academic_session={self.academic_session!r})>"
