"""
Campaign Desk - FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import SessionLocal, init_db
from .exceptions import CampaignDeskError, GatewayError, InvalidContentError
from .routers import (
    admin_router,
    campaigns_router,
    clients_router,
    invoices_router,
    payments_router,
    services_router,
)
from .services.auth_service import get_auth_service
from .services.email_service import EmailService
from .services.razorpay_service import RazorpayService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Campaign Desk API...")
    init_db()
    logger.info("Database initialized")

    if settings.admin_email and settings.admin_password:
        db = SessionLocal()
        try:
            get_auth_service().ensure_default_admin(db, settings.admin_email, settings.admin_password)
        finally:
            db.close()

    app.state.payment_gateway = RazorpayService.from_settings(settings)
    app.state.email_service = EmailService.from_settings(settings)

    yield

    # Shutdown
    logger.info("Shutting down Campaign Desk API...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Campaign ordering, catalog pricing and payment settlement",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(campaigns_router)
app.include_router(payments_router)
app.include_router(services_router)
app.include_router(clients_router)
app.include_router(admin_router)
app.include_router(invoices_router)


@app.exception_handler(InvalidContentError)
async def invalid_content_handler(request: Request, exc: InvalidContentError):
    logger.warning(f"Invalid content on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "errors": exc.invalid},
    )


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error(f"Gateway error on {request.url.path}: {exc.message} (status {exc.gateway_status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": "Payment gateway error"},
    )


@app.exception_handler(CampaignDeskError)
async def campaign_desk_error_handler(request: Request, exc: CampaignDeskError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


def run():
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "campaign_desk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
