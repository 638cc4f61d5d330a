"""
Kos Hunter application entry point
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from kosrent import __version__
from kosrent.config import settings
from kosrent.database import init_db
from kosrent.exceptions import KosError
from kosrent.routers import auth, users, kos, rooms, bookings, facilities, reviews

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup"""
    init_db()
    logger.info("%s %s started", settings.APP_NAME, __version__)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Kos (boarding house) rental marketplace API",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============== Error envelopes ==============

def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": False, "message": message})


@app.exception_handler(KosError)
async def kos_error_handler(request: Request, exc: KosError):
    return _failure(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _failure(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return _failure(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============== Routes ==============

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(kos.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(facilities.router)
app.include_router(reviews.router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "description": "Kos (boarding house) rental marketplace API"
    }


@app.get("/health")
def health_check():
    """Health check"""
    return {"status": True, "message": "healthy"}
