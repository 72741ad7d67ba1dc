from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resourcedesk.api.routes import (
    absences,
    classrooms,
    courses,
    dashboard,
    departments,
    faculty,
    health,
    sections,
    time_slots,
    timetable,
)
from resourcedesk.core.config import get_settings
from resourcedesk.core.exceptions import AllocationError, AppError
from resourcedesk.core.logging_config import configure_logging
from resourcedesk.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from resourcedesk.db.bootstrap import ensure_schema
from resourcedesk.db.session import engine

settings = get_settings()
logger = logging.getLogger("resourcedesk")


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings)
    ensure_schema(engine, seed_time_slots=settings.seed_default_time_slots)
    logger.info("%s started", settings.project_name)
    yield


async def app_error_handler(request: Request, exc: AppError):
    content = {"message": exc.message, "details": exc.details}
    if isinstance(exc, AllocationError):
        content["kind"] = exc.kind.value
    return JSONResponse(status_code=exc.status_code, content=content)


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(departments.router, prefix=f"{settings.api_prefix}/departments", tags=["departments"])
app.include_router(faculty.router, prefix=f"{settings.api_prefix}/faculty", tags=["faculty"])
app.include_router(classrooms.router, prefix=f"{settings.api_prefix}/classrooms", tags=["classrooms"])
app.include_router(courses.router, prefix=f"{settings.api_prefix}/courses", tags=["courses"])
app.include_router(sections.router, prefix=f"{settings.api_prefix}/sections", tags=["sections"])
app.include_router(time_slots.router, prefix=f"{settings.api_prefix}/time-slots", tags=["time-slots"])
app.include_router(timetable.router, prefix=f"{settings.api_prefix}/timetable", tags=["timetable"])
app.include_router(absences.router, prefix=settings.api_prefix, tags=["absences"])
app.include_router(dashboard.router, prefix=settings.api_prefix, tags=["dashboard"])
