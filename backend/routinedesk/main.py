from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routinedesk.api.routes import attendance, dashboard, health, programs, rooms, sections, semesters, time_slots
from routinedesk.core.config import get_settings
from routinedesk.core.exceptions import AppError
from routinedesk.core.logging import configure_logging
from routinedesk.core.middleware import RequestSizeLimitMiddleware, RequestTimingMiddleware
from routinedesk.db.bootstrap import ensure_schema
from routinedesk.db.session import engine

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.auto_create_schema:
        ensure_schema(engine)
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestTimingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(time_slots.router, prefix=f"{settings.api_prefix}/time-slots", tags=["time-slots"])
app.include_router(programs.router, prefix=f"{settings.api_prefix}/programs", tags=["programs"])
app.include_router(rooms.router, prefix=f"{settings.api_prefix}/rooms", tags=["rooms"])
app.include_router(sections.router, prefix=f"{settings.api_prefix}/sections", tags=["sections"])
app.include_router(semesters.router, prefix=f"{settings.api_prefix}/semesters", tags=["semesters"])
app.include_router(attendance.router, prefix=f"{settings.api_prefix}/semesters", tags=["attendance"])
app.include_router(dashboard.router, prefix=f"{settings.api_prefix}/dashboard", tags=["dashboard"])
