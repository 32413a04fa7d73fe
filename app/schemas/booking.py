from pydantic import BaseModel, Field


class BookingUpdate(BaseModel):
    client_name: str = Field(min_length=1)
    client_email: str = ""
    # nanoseconds since epoch
    date_time: int = Field(ge=0)
    duration_minutes: int = Field(ge=1)
    notes: str = ""
    is_confirmed: bool = False


class AppointmentRequest(BaseModel):
    client_name: str = Field(min_length=1)
    client_email: str = ""
    date_time: int = Field(ge=0)
    duration_minutes: int = Field(ge=1)
    notes: str = ""


class BookingOut(BookingUpdate):
    id: int
    trainer_id: int

    class Config:
        from_attributes = True


class BookingCreated(BaseModel):
    id: int
