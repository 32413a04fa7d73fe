from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.profile import router as profile_router
from app.api.v1.clients import router as clients_router
from app.api.v1.workouts import router as workouts_router
from app.api.v1.progress import router as progress_router
from app.api.v1.bookings import router as bookings_router
from app.api.v1.admin import router as admin_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_router.include_router(clients_router, prefix="/clients", tags=["clients"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(progress_router, prefix="/progress", tags=["progress"])
api_router.include_router(bookings_router, prefix="/bookings", tags=["bookings"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
