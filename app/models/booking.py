from sqlalchemy import Column, Integer, BigInteger, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from app.core.base import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)
    client_name = Column(String, nullable=False)
    client_email = Column(String, default="", nullable=False)
    # nanoseconds since epoch
    date_time = Column(BigInteger, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    notes = Column(String, default="", nullable=False)
    is_confirmed = Column(Boolean, default=False, nullable=False)

    trainer = relationship("Trainer", back_populates="bookings")
