import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import ExcelFileOut
from models.db_models import User
from routers.deps import get_current_user
from services import storage_service
from services.errors import ParseError
from services.excel_reader_service import describe_sheets, parse_workbook
from services.file_upload_service import UploadRejected, remove_stored_file, save_uploaded_file
from services.preview_service import sheet_preview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload")
def upload_excel(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        filename, file_path, file_size = save_uploaded_file(file)
    except UploadRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    try:
        workbook = parse_workbook(file_path)
    except ParseError:
        remove_stored_file(file_path)
        raise

    if not workbook.sheet_names:
        remove_stored_file(file_path)
        raise HTTPException(status_code=400, detail="Uploaded Excel has no sheets.")

    saved = storage_service.create_excel_file(
        db,
        user_id=user.id,
        filename=filename,
        original_name=file.filename,
        file_path=file_path,
        file_size=file_size,
        sheets=workbook.sheet_names,
        columns=workbook.columns,
        row_count=workbook.total_row_count,
    )
    logger.info(f"User {user.id} uploaded file {saved.id} with {len(workbook.sheet_names)} sheets")

    return {
        "file": ExcelFileOut.model_validate(saved),
        "sheets": {
            name: sheet_preview(sheet) for name, sheet in workbook.sheets.items()
        },
        "sheet_info": [s.model_dump() for s in describe_sheets(workbook)],
        "summary": {
            "totalSheets": len(workbook.sheet_names),
            "totalRows": workbook.total_row_count,
            "sheetNames": workbook.sheet_names,
        },
    }
