from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.core.base import Base


class BodyWeightEntry(Base):
    __tablename__ = "body_weight_entries"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    weight = Column(Integer, nullable=False)
    date = Column(String, nullable=False)

    client = relationship("Client", back_populates="body_weights")


class ExercisePerformance(Base):
    __tablename__ = "exercise_performances"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    date = Column(String, nullable=False)
    exercise = Column(JSON, nullable=False)

    client = relationship("Client", back_populates="performances")


class WorkoutProgress(Base):
    __tablename__ = "workout_progress"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    date = Column(String, nullable=False)
    exercises = Column(JSON, default=list, nullable=False)
    comments = Column(String, default="", nullable=False)

    client = relationship("Client", back_populates="progress")
