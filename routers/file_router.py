from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import AxisValidationRequest, ExcelFileOut
from models.db_models import ExcelFile, User
from routers.deps import ensure_access, get_current_user
from services import storage_service
from services.excel_reader_service import get_sheet, parse_workbook
from services.file_upload_service import remove_stored_file
from services.preview_service import get_preview_rows, sheet_preview
from services.stats_service import summarize, summarize_sheet
from services.validation_service import validate_axes

router = APIRouter(prefix="/api/files", tags=["files"])


def load_owned_file(db: Session, file_id: int, user: User) -> ExcelFile:
    excel_file = storage_service.get_excel_file(db, file_id)
    if not excel_file:
        raise HTTPException(status_code=404, detail="File not found")
    ensure_access(excel_file, user)
    return excel_file


@router.get("", response_model=List[ExcelFileOut])
def list_files(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return storage_service.get_user_excel_files(db, user.id)


@router.get("/{file_id}")
def get_file(file_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    excel_file = load_owned_file(db, file_id, user)
    workbook = parse_workbook(excel_file.file_path)

    return {
        "file": ExcelFileOut.model_validate(excel_file),
        "sheets": {name: sheet_preview(sheet) for name, sheet in workbook.sheets.items()},
        "analysis": [
            summarize_sheet(get_sheet(workbook, name)).model_dump(by_alias=True)
            for name in workbook.sheet_names
        ],
    }


@router.delete("/{file_id}")
def delete_file(file_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    excel_file = load_owned_file(db, file_id, user)
    file_path = excel_file.file_path
    storage_service.delete_excel_file(db, file_id)
    remove_stored_file(file_path)
    return {"message": "File deleted successfully"}


@router.get("/{file_id}/sheets/{sheet_name}/preview")
def preview_sheet(
    file_id: int,
    sheet_name: str,
    n_rows: int = 20,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    excel_file = load_owned_file(db, file_id, user)
    return get_preview_rows(excel_file.file_path, sheet_name, n_rows)


@router.get("/{file_id}/sheets/{sheet_name}/summary")
def sheet_summary(
    file_id: int,
    sheet_name: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    excel_file = load_owned_file(db, file_id, user)
    return summarize(excel_file.file_path, sheet_name).model_dump(by_alias=True)


@router.post("/{file_id}/validate")
def validate_chart_axes(
    file_id: int,
    req: AxisValidationRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    excel_file = load_owned_file(db, file_id, user)
    sheet = get_sheet(parse_workbook(excel_file.file_path), req.sheet_name)
    validate_axes(sheet, req.x_axis, req.y_axis)
    return {"valid": True}
