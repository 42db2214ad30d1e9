from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.config import settings
from app.database import Database
from app.core.middleware import AuthGateMiddleware
from app.features.auth.gate import Authenticator
from app.features.auth.router import router as auth_router
from app.features.patients.router import router as patients_router
from app.features.appointments.router import router as appointments_router
from app.features.medical_records.router import router as medical_records_router
from app.features.prescriptions.router import router as prescriptions_router
from app.features.dashboard.router import router as dashboard_router
from app.features.calendar.router import router as calendar_router
from app.features.calendar.router import google_auth_router
from app.core.logging import logger


# Paths under API_PREFIX that require a bearer token
PROTECTED_PATHS = [
    "/patients",
    "/appointments",
    "/medical-records",
    "/prescriptions",
    "/dashboard",
    "/calendar",
    "/auth/me",
    "/auth/change-password",
    "/auth/google/calendar",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI application."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    await Database.connect_db()

    if settings.AUTH_DEV_USER_EMAIL:
        logger.warning(
            f"AUTH_DEV_USER_EMAIL is set: requests without a token act as {settings.AUTH_DEV_USER_EMAIL}"
        )

    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await Database.close_db()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Clinic Management Backend API",
    version="1.0.0",
    lifespan=lifespan,
)

# Authenticate protected routes before they run
authenticator = Authenticator(dev_user_email=settings.AUTH_DEV_USER_EMAIL)
app.add_middleware(
    AuthGateMiddleware,
    authenticator=authenticator,
    protected_prefixes=[settings.API_PREFIX + path for path in PROTECTED_PATHS],
)

# Configure CORS (added last so it wraps the auth gate)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid requests as 400 with a readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Register routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(google_auth_router, prefix=settings.API_PREFIX)
app.include_router(patients_router, prefix=settings.API_PREFIX)
app.include_router(appointments_router, prefix=settings.API_PREFIX)
app.include_router(medical_records_router, prefix=settings.API_PREFIX)
app.include_router(prescriptions_router, prefix=settings.API_PREFIX)
app.include_router(dashboard_router, prefix=settings.API_PREFIX)
app.include_router(calendar_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }
