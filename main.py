from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import performance
from app.api import ranking
from app.api import system
from app.api.performance_utils.cache import configure_cache
from app.core.config import CACHE_MAX_ENTRIES, FRONTEND_URL
from app.core.errors import PerformanceError
from app.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Agent Performance API",
    description="""
    Read-only API for the agent dashboard.
    Serves per-agent ranking data and listing performance rollups
    (current month, any month, whole year) computed from Bitrix24 CRM listings.
    """,
    version="1.0.0",
    contact={
        "name": "Agent Performance Dev Team",
    },
    license_info={
        "name": "MIT",
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL, "http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)


@app.on_event("startup")
async def on_startup():
    configure_cache(max_entries=CACHE_MAX_ENTRIES)


@app.exception_handler(PerformanceError)
async def performance_error_handler(request: Request, exc: PerformanceError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    messages = {
        status.HTTP_404_NOT_FOUND: "Resource not found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "Method Not Allowed",
    }
    message = messages.get(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    field = errors[0]["loc"][-1] if errors and errors[0].get("loc") else "request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid parameter '{field}'"},
    )


app.include_router(performance.router, tags=["Performance"])
app.include_router(ranking.router, tags=["Ranking"])
app.include_router(system.router, tags=["System"])


@app.get("/")
async def root():
    return {"message": "Agent Performance API is running"}
