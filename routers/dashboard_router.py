from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import ChartOut, ExcelFileOut
from models.db_models import User
from routers.deps import get_current_user
from services.storage_service import get_dashboard_stats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def dashboard_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    stats = get_dashboard_stats(db, user)
    stats["recentFiles"] = [ExcelFileOut.model_validate(f) for f in stats["recentFiles"]]
    stats["recentCharts"] = [ChartOut.model_validate(c) for c in stats["recentCharts"]]
    return stats
