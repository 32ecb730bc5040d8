from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import InterfaceError, OperationalError
from .core.database import init_db, shutdown_db
from .core.logging_config import setup_logging
from .core.telemetry import setup_telemetry
from .api.routes import auth, projects, reviews, users
from .api.exceptions import (
    catalog_exception_handler,
    validation_exception_handler,
    database_error_handler,
    general_exception_handler
)
from .exceptions import CatalogException
from .config import settings
import logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema bootstrap failures outside development leave the app serving 503s
    init_db()
    logger.info(f"Project catalog started ({settings.environment})")
    yield
    shutdown_db()


app = FastAPI(title="Project Catalog API", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(CatalogException, catalog_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(OperationalError, database_error_handler)
app.add_exception_handler(InterfaceError, database_error_handler)
app.add_exception_handler(Exception, general_exception_handler)

if settings.telemetry_enabled:
    setup_telemetry(app)

# Include routers
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(reviews.router)
app.include_router(users.router)


@app.get("/")
def root():
    return {"message": "Project Catalog API"}


@app.get("/health")
def health():
    return {"status": "healthy"}
