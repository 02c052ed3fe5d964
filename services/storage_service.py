import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from models.db_models import AuthToken, Chart, ExcelFile, PasswordReset, User

logger = logging.getLogger(__name__)


# ---------------- Users ----------------

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, **fields) -> User:
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, **updates) -> Optional[User]:
    user = get_user(db, user_id)
    if not user:
        return None
    for key, value in updates.items():
        setattr(user, key, value)
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


def get_all_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def deactivate_user(db: Session, user_id: int) -> Optional[User]:
    user = update_user(db, user_id, is_active=False)
    if user:
        db.query(AuthToken).filter(AuthToken.user_id == user_id).delete()
        db.commit()
    return user


# ---------------- Tokens ----------------

def create_auth_token(db: Session, user_id: int, token: str, expires_at: datetime) -> AuthToken:
    record = AuthToken(token=token, user_id=user_id, expires_at=expires_at)
    db.add(record)
    db.commit()
    return record


def get_auth_token(db: Session, token: str) -> Optional[AuthToken]:
    return db.get(AuthToken, token)


def delete_auth_token(db: Session, token: str) -> None:
    db.query(AuthToken).filter(AuthToken.token == token).delete()
    db.commit()


def create_password_reset(db: Session, user_id: int, token: str, expires_at: datetime) -> PasswordReset:
    reset = PasswordReset(user_id=user_id, token=token, expires_at=expires_at, used=False)
    db.add(reset)
    db.commit()
    return reset


def get_password_reset(db: Session, token: str) -> Optional[PasswordReset]:
    return (
        db.query(PasswordReset)
        .filter(PasswordReset.token == token, PasswordReset.used.is_(False))
        .first()
    )


def mark_password_reset_used(db: Session, reset_id: int) -> None:
    db.query(PasswordReset).filter(PasswordReset.id == reset_id).update({"used": True})
    db.commit()


# ---------------- Files ----------------

def create_excel_file(db: Session, **fields) -> ExcelFile:
    excel_file = ExcelFile(**fields)
    db.add(excel_file)
    db.commit()
    db.refresh(excel_file)
    return excel_file


def get_excel_file(db: Session, file_id: int) -> Optional[ExcelFile]:
    return db.get(ExcelFile, file_id)


def get_user_excel_files(db: Session, user_id: int) -> List[ExcelFile]:
    return (
        db.query(ExcelFile)
        .filter(ExcelFile.user_id == user_id)
        .order_by(ExcelFile.uploaded_at.desc(), ExcelFile.id.desc())
        .all()
    )


def get_all_excel_files(db: Session) -> List[ExcelFile]:
    return db.query(ExcelFile).order_by(ExcelFile.uploaded_at.desc(), ExcelFile.id.desc()).all()


def delete_excel_file(db: Session, file_id: int) -> None:
    excel_file = get_excel_file(db, file_id)
    if excel_file:
        # charts go with it through the relationship cascade
        db.delete(excel_file)
        db.commit()


# ---------------- Charts ----------------

def create_chart(db: Session, **fields) -> Chart:
    chart = Chart(**fields)
    db.add(chart)
    db.commit()
    db.refresh(chart)
    return chart


def get_chart(db: Session, chart_id: int) -> Optional[Chart]:
    return db.get(Chart, chart_id)


def get_user_charts(db: Session, user_id: int) -> List[Chart]:
    return (
        db.query(Chart)
        .filter(Chart.user_id == user_id)
        .order_by(Chart.created_at.desc(), Chart.id.desc())
        .all()
    )


def get_all_charts(db: Session) -> List[Chart]:
    return db.query(Chart).order_by(Chart.created_at.desc(), Chart.id.desc()).all()


def update_chart(db: Session, chart_id: int, **updates) -> Optional[Chart]:
    """Only title and chart_options are ever changed after creation."""
    chart = get_chart(db, chart_id)
    if not chart:
        return None
    for key in ("title", "chart_options"):
        if updates.get(key) is not None:
            setattr(chart, key, updates[key])
    db.commit()
    db.refresh(chart)
    return chart


def delete_chart(db: Session, chart_id: int) -> None:
    db.query(Chart).filter(Chart.id == chart_id).delete()
    db.commit()


# ---------------- Dashboard ----------------

def get_dashboard_stats(db: Session, user: User) -> Dict[str, Any]:
    files = get_user_excel_files(db, user.id)
    charts = get_user_charts(db, user.id)

    stats: Dict[str, Any] = {
        "totalFiles": len(files),
        "totalCharts": len(charts),
        "totalRows": sum(f.row_count for f in files),
        "recentFiles": files[:5],
        "recentCharts": charts[:5],
        "chartTypes": dict(Counter(c.chart_type for c in charts)),
    }

    if user.role == "admin":
        all_users = get_all_users(db)
        all_files = get_all_excel_files(db)
        stats["adminStats"] = {
            "totalUsers": len(all_users),
            "activeUsers": sum(1 for u in all_users if u.is_active),
            "totalSystemFiles": len(all_files),
            "totalSystemCharts": db.query(Chart).count(),
            "totalSystemRows": sum(f.row_count for f in all_files),
        }

    return stats
