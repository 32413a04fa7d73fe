from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.base import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    # bcrypt hash of the client's personal access code
    code = Column(String, nullable=False)
    email_or_nickname = Column(String, nullable=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)
    height = Column(Integer, nullable=True)
    refresh_token = Column(String, nullable=True)
    refresh_token_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    trainer = relationship("Trainer", back_populates="clients")
    workouts = relationship("Workout", back_populates="client", cascade="all, delete")
    workout_logs = relationship("WorkoutLog", back_populates="client", cascade="all, delete")
    body_weights = relationship("BodyWeightEntry", back_populates="client", cascade="all, delete")
    performances = relationship("ExercisePerformance", back_populates="client", cascade="all, delete")
    progress = relationship("WorkoutProgress", back_populates="client", cascade="all, delete")
