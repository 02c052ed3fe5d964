import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import ChartOut, ChartRequest, ChartUpdateRequest
from models.db_models import Chart, User
from routers.deps import ensure_access, get_current_user
from routers.file_router import load_owned_file
from services import storage_service
from services.chart_data_service import default_chart_options, extract_3d_chart_data, extract_chart_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/charts", tags=["charts"])


def build_chart_data(file_path: str, req: ChartRequest) -> Any:
    """JSON-ready chart payload for the request; 3D charts are a list of points."""
    if req.is_3d:
        points = extract_3d_chart_data(
            file_path, req.sheet_name, req.x_axis, req.y_axis, req.z_axis, req.limit
        )
        return [p.model_dump() for p in points]
    chart_data = extract_chart_data(file_path, req.sheet_name, req.x_axis, req.y_axis, req.limit)
    return chart_data.model_dump(by_alias=True)


def load_owned_chart(db: Session, chart_id: int, user: User) -> Chart:
    chart = storage_service.get_chart(db, chart_id)
    if not chart:
        raise HTTPException(status_code=404, detail="Chart not found")
    ensure_access(chart, user)
    return chart


@router.post("", response_model=ChartOut)
def create_chart(req: ChartRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    excel_file = load_owned_file(db, req.file_id, user)
    chart_data = build_chart_data(excel_file.file_path, req)

    chart = storage_service.create_chart(
        db,
        user_id=user.id,
        file_id=excel_file.id,
        title=req.title,
        chart_type=req.chart_type,
        x_axis=req.x_axis,
        y_axis=req.y_axis,
        z_axis=req.z_axis if req.is_3d else None,
        sheet_name=req.sheet_name,
        chart_data=chart_data,
        chart_options=default_chart_options(req.title),
        is_3d=req.is_3d,
    )
    logger.info(f"User {user.id} created chart {chart.id} from file {excel_file.id}")
    return chart


@router.post("/preview", response_model=ChartOut)
def preview_chart(req: ChartRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Same as creating a chart, but nothing is stored."""
    excel_file = load_owned_file(db, req.file_id, user)
    return ChartOut(
        user_id=user.id,
        file_id=excel_file.id,
        title=req.title,
        chart_type=req.chart_type,
        x_axis=req.x_axis,
        y_axis=req.y_axis,
        z_axis=req.z_axis if req.is_3d else None,
        sheet_name=req.sheet_name,
        chart_data=build_chart_data(excel_file.file_path, req),
        chart_options=default_chart_options(req.title),
        is_3d=req.is_3d,
    )


@router.get("", response_model=List[ChartOut])
def list_charts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return storage_service.get_user_charts(db, user.id)


@router.get("/{chart_id}", response_model=ChartOut)
def get_chart(chart_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return load_owned_chart(db, chart_id, user)


@router.put("/{chart_id}", response_model=ChartOut)
def update_chart(
    chart_id: int,
    req: ChartUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    load_owned_chart(db, chart_id, user)
    return storage_service.update_chart(db, chart_id, title=req.title, chart_options=req.chart_options)


@router.delete("/{chart_id}")
def delete_chart(chart_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    load_owned_chart(db, chart_id, user)
    storage_service.delete_chart(db, chart_id)
    return {"message": "Chart deleted successfully"}
