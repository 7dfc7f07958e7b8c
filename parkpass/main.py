from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from parkpass.config import settings
from parkpass.database import Base, SessionLocal, engine
from parkpass.exceptions import ParkPassError
from parkpass.logging_config import configure_logging
from parkpass.auth import router as auth_router
from parkpass.spots import router as spots_router
from parkpass.bookings import router as bookings_router
from parkpass.payments import router as payments_router
from parkpass.notifications import router as notifications_router
from parkpass.admin import router as admin_router
from parkpass.bookings.sweeps import BookingSweeps
from parkpass.scheduler import SweepScheduler

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
    if settings.SCHEDULER_ENABLED:
        app.state.scheduler.start()
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    try:
        yield
    finally:
        app.state.scheduler.stop()

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Parking spot marketplace API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.scheduler = SweepScheduler(BookingSweeps(SessionLocal))

@app.exception_handler(ParkPassError)
def handle_domain_error(request: Request, exc: ParkPassError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error_code}
    )

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    spots_router.router,
    prefix=f"{settings.API_V1_STR}/spots",
    tags=["Parking Spots"]
)

app.include_router(
    bookings_router.router,
    prefix=f"{settings.API_V1_STR}/bookings",
    tags=["Bookings"]
)

app.include_router(
    payments_router.router,
    prefix=f"{settings.API_V1_STR}/payments",
    tags=["Payments"]
)

app.include_router(
    notifications_router.router,
    prefix=f"{settings.API_V1_STR}/notifications",
    tags=["Notifications"]
)

app.include_router(
    admin_router.router,
    prefix=f"{settings.API_V1_STR}/admin",
    tags=["Admin"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "ParkPass Parking Marketplace API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
