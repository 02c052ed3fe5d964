from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import ChartOut, ExcelFileOut, UserOut
from routers.deps import require_admin
from services import storage_service

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=List[UserOut])
def all_users(db: Session = Depends(get_db)):
    return storage_service.get_all_users(db)


@router.get("/files", response_model=List[ExcelFileOut])
def all_files(db: Session = Depends(get_db)):
    return storage_service.get_all_excel_files(db)


@router.get("/charts", response_model=List[ChartOut])
def all_charts(db: Session = Depends(get_db)):
    return storage_service.get_all_charts(db)


@router.put("/users/{user_id}/deactivate", response_model=UserOut)
def deactivate_user(user_id: int, db: Session = Depends(get_db)):
    user = storage_service.deactivate_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
