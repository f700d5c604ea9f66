"""
Files attached to a task.

Rows are written by the media upload integration, which stores the binary on
Cloudinary and records the returned identifiers here. The API reads them to
list a task's attachments.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from kanban.models.base import Base, CreatedAtMixin, IntegerIDMixin


class TaskAttachment(Base, IntegerIDMixin, CreatedAtMixin):
    __tablename__ = "task_attachments"
    __table_args__ = (
        Index("ix_task_attachments_task_id", "task_id"),
        Index("ix_task_attachments_cloudinary_public_id", "cloudinary_public_id"),
    )

    task_id = Column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
    )

    file_name = Column(String(255), nullable=False)

    file_size = Column(BigInteger, nullable=False, comment="Size in bytes")

    mime_type = Column(String(100), nullable=False)

    cloudinary_public_id = Column(String(255), nullable=False)

    cloudinary_url = Column(Text, nullable=False)

    cloudinary_secure_url = Column(Text, nullable=False, comment="HTTPS URL")

    uploaded_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    task = relationship("Task", back_populates="attachments")

    def __repr__(self):
        return f"<TaskAttachment(id={self.id}, task_id={self.task_id}, file_name='{self.file_name}')>"
