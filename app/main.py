import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import settings
from app.core.database import init_database
from app.core.errors import register_exception_handlers
from app.services.query_cache import query_cache

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database()
    logger.info("PT Coach started (cache %s)", "on" if query_cache.enabled else "off")
    yield
    await query_cache.close()


app = FastAPI(title="PT Coach - trainer and client workouts", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "app": "PT Coach",
        "message": "Trainer and client workout management",
        "links": {
            "docs": "/docs",
            "redoc": "/redoc",
            "api": "/api/v1",
        },
    }
