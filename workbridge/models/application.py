"""
Application Model - A worker applying to a job

Status Flow:
    Submitted → Viewed → Shortlisted / Rejected
"""

from sqlalchemy import Column, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from workbridge.database import Base
import uuid


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "worker_id", name="uq_application_job_worker"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_id = Column(String, nullable=False, index=True)
    worker_id = Column(String, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Submitted", index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
