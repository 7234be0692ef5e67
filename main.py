"""
Wedding Seating Chart - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base, SessionLocal
from app.api import routes_admin, routes_public, routes_seating
from app.services.integrity_service import IntegrityService
from app.services.table_config_service import TableConfigService

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        TableConfigService.seed_tables(db)
        # Rows parked at the staging table mean a swap was interrupted
        IntegrityService.repair_staged_rows(db)
        for violation in IntegrityService.find_violations(db):
            logger.warning("Seating integrity: %s", violation["message"])
    finally:
        db.close()

    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Wedding Seating Chart",
    description="Seat allocation, moves and swaps for the wedding seating chart",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_seating.router, prefix="/admin/tables", tags=["seating"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
