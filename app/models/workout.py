from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.core.base import Base


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    # username of whoever authored it: the trainer's email or the client's username
    creator = Column(String, nullable=False)
    name = Column(String, nullable=False)
    comments = Column(String, default="", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    client = relationship("Client", back_populates="workouts")
    exercises = relationship(
        "Exercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="Exercise.position",
        lazy="selectin",
    )


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    name = Column(String, nullable=False)
    sets = Column(Integer, default=3, nullable=False)
    repetitions = Column(Integer, default=10, nullable=False)
    set_weights = Column(JSON, default=list, nullable=False)
    rest_time = Column(Integer, default=60, nullable=False)

    workout = relationship("Workout", back_populates="exercises")
