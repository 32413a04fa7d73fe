from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.base import Base


class WorkoutLog(Base):
    """One logged session. Rows are only ever appended."""

    __tablename__ = "workout_logs"

    id = Column(Integer, primary_key=True)
    log_key = Column(String, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    workout_name = Column(String, nullable=False)
    date = Column(String, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    client_notes = Column(String, nullable=True)
    comments = Column(String, default="", nullable=False)
    exercises = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    client = relationship("Client", back_populates="workout_logs")

    __table_args__ = (
        UniqueConstraint("client_id", "log_key", name="uq_workout_logs_client_key"),
    )
