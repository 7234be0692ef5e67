"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.services.repositories import TableConfigRepo

router = APIRouter()

@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check; also confirms the seating store answers"""
    return {"status": "ok", "tables": len(TableConfigRepo.list_table_configs(db))}
