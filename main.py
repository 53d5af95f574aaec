"""
YaraCheck - FastAPI Application Entry Point

This is the main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yaracheck.config import settings
from yaracheck.database import async_session_factory, close_db, init_db
from yaracheck.routers import (
    admin_reports,
    admin_users,
    assets,
    auth,
    dashboard,
    payments,
    pricing,
    reports,
    roi,
    support,
)
from yaracheck.utils.error_handling import setup_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def seed_super_admin():
    """
    Seed the configured Super Admin on startup.
    Skipped unless SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD are set.
    """
    from yaracheck.services.auth_service import AuthService

    async with async_session_factory() as session:
        super_admin = await AuthService(session).ensure_super_admin()
        if super_admin:
            logger.info(f"Super Admin ready: {super_admin.email}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.app_env}")

    # Initialize database (dev only - use migrations in production)
    if settings.is_development:
        await init_db()
        logger.info("Database tables initialized")

    try:
        await seed_super_admin()
    except Exception as e:
        logger.warning(f"Super Admin seeding skipped: {e}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Lost-and-found and anti-theft reporting: missing persons, stolen devices and vehicles, hacked accounts and business reputation disputes",
    version="0.1.0",
    docs_url="/api/docs" if settings.is_development else None,
    redoc_url="/api/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Standardized error envelope for AppException, HTTP, validation and database errors
setup_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.app_env,
    }


@app.get("/api/v1")
async def api_root():
    """API v1 root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name} API v1",
        "endpoints": {
            "auth": "/api/v1/auth",
            "pricing": "/api/v1/pricing",
            "reports": "/api/v1/reports",
            "payments": "/api/v1/payments",
            "admin_reports": "/api/v1/admin/reports",
            "admin_users": "/api/v1/admin/users",
            "admin_dashboard": "/api/v1/admin/dashboard",
            "roi": "/api/v1/roi",
            "assets": "/api/v1/assets",
            "support": "/api/v1/support",
        }
    }


# ===========================================
# INCLUDE ROUTERS
# ===========================================

# Public
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(pricing.router, prefix="/api/v1/pricing", tags=["Pricing"])
app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])
app.include_router(support.router, prefix="/api/v1/support", tags=["Support"])

# Admin
app.include_router(admin_reports.router, prefix="/api/v1/admin/reports", tags=["Admin Reports"])
app.include_router(admin_users.router, prefix="/api/v1/admin/users", tags=["Admin Accounts"])
app.include_router(dashboard.router, prefix="/api/v1/admin/dashboard", tags=["Admin Dashboard"])
app.include_router(roi.router, prefix="/api/v1/roi", tags=["ROI"])
app.include_router(assets.router, prefix="/api/v1/assets", tags=["Company Assets"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
