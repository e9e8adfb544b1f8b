import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fittrack.api.exercises import router as exercises_router
from fittrack.api.nutrition import router as nutrition_router
from fittrack.api.progress import router as progress_router
from fittrack.api.prs import router as prs_router
from fittrack.api.schedule import router as schedule_router
from fittrack.api.sleep import router as sleep_router
from fittrack.api.stats import router as stats_router
from fittrack.api.workouts import router as workouts_router
from fittrack.core.config import settings
from fittrack.core.exceptions import APIException, api_exception_handler
from fittrack.core.logging import setup_logging
from fittrack.db import Base, engine
# Import models so their tables are registered
from fittrack.models import meal_log, profile, schedule_event, sleep_log, weight_log, workout  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="fittrack")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(APIException, api_exception_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with status and timing."""
    start_time = time.time()
    response = await call_next(request)
    elapsed_ms = (time.time() - start_time) * 1000
    logger.info(
        "%s %s - %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        extra={
            "extra_fields": {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed_ms, 1),
            }
        },
    )
    return response


# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(schedule_router)
app.include_router(prs_router)
app.include_router(exercises_router)
app.include_router(workouts_router)
app.include_router(stats_router)
app.include_router(progress_router)
app.include_router(nutrition_router)
app.include_router(sleep_router)


@app.get("/")
def root():
    return {"message": "fittrack backend is running"}
