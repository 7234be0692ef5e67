"""
Admin API routes for the guest roster and exports - requires authentication
"""

from fastapi import APIRouter, Depends, UploadFile, File, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional

from app.core.config import settings
from app.core.db import get_db
from app.schemas.guest import GuestCreate, GuestResponse
from app.services.export_service import ExportService
from app.services.repositories import GuestRepo
from app.services.roster_service import RosterService
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, error_response

router = APIRouter(dependencies=[Depends(verify_admin_token)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

@router.get("/roster")
async def list_roster(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """List the guest roster, optionally filtered by name"""
    guests = GuestRepo.search(db, search) if search else GuestRepo.list_roster(db)
    return success_response(
        message="Guests retrieved successfully",
        data=[GuestResponse.model_validate(g).model_dump() for g in guests]
    )

@router.post("/roster")
async def add_guest(guest_data: GuestCreate, db: Session = Depends(get_db)):
    """Add one invitation to the roster"""
    host_tag = guest_data.host_tag.lower()
    if host_tag not in [h.lower() for h in settings.HOST_TAGS]:
        return error_response(
            message=f"Host must be one of {', '.join(settings.HOST_TAGS)}",
            status_code=422
        )
    fields = guest_data.model_dump()
    fields["host_tag"] = host_tag
    guest = GuestRepo.create(db, **fields)
    db.commit()
    db.refresh(guest)
    return success_response(
        message="Guest added",
        data=GuestResponse.model_validate(guest).model_dump(),
        status_code=201
    )

@router.post("/roster/upload")
async def upload_roster(
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """Upload and process an Excel roster"""
    # Validate file type
    if not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(
            message="File too large",
            status_code=413
        )

    success, errors, processed_count = RosterService.process_roster_upload(
        file_content=file_content,
        db=db
    )

    if not success:
        return error_response(
            message="Roster file validation failed",
            details=errors,
            status_code=422
        )

    return success_response(
        message=f"Roster processed successfully. {processed_count} guests imported.",
        data={
            "processed_count": processed_count,
            "filename": file.filename
        }
    )

@router.get("/roster/template.xlsx")
async def download_roster_template():
    """Download the roster Excel template"""
    return Response(
        content=RosterService.create_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guest_roster_template.xlsx"}
    )

@router.get("/tables/export/alphabetical.xlsx")
async def export_alphabetical(db: Session = Depends(get_db)):
    """Seated guests sorted by name"""
    return Response(
        content=ExportService.export_alphabetical(db),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guests_alphabetical.xlsx"}
    )

@router.get("/tables/export/by-table.xlsx")
async def export_by_table(db: Session = Depends(get_db)):
    """Seated guests by table and seat"""
    return Response(
        content=ExportService.export_by_table(db),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guests_by_table.xlsx"}
    )
