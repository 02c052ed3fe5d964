from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

ChartType = Literal["bar", "line", "pie", "scatter", "doughnut"]


class SheetInfo(BaseModel):
    sheet_name: str
    headers: List[str] = []
    n_rows: int
    n_cols: int


# ---------------- Auth ----------------

class RegisterRequest(BaseModel):
    username: str = Field(min_length=3)
    email: str
    password: str = Field(min_length=6)
    full_name: str


class LoginRequest(BaseModel):
    username: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(min_length=6)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut


# ---------------- Files ----------------

class ExcelFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    filename: str
    original_name: str
    file_size: int
    sheets: List[str]
    columns: Dict[str, List[str]]
    row_count: int
    uploaded_at: Optional[datetime] = None


class AxisValidationRequest(BaseModel):
    sheet_name: str
    x_axis: str
    y_axis: str


# ---------------- Charts ----------------

class ChartRequest(BaseModel):
    file_id: int
    title: str = "Untitled Chart"
    chart_type: ChartType = "bar"
    sheet_name: str
    x_axis: str
    y_axis: str
    z_axis: Optional[str] = None
    is_3d: bool = False
    limit: Optional[int] = Field(default=None, ge=1)


class ChartUpdateRequest(BaseModel):
    title: Optional[str] = None
    chart_options: Optional[Dict[str, Any]] = None


class ChartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None   # None for previews
    user_id: int
    file_id: int
    title: str
    chart_type: str
    x_axis: str
    y_axis: str
    z_axis: Optional[str] = None
    sheet_name: str
    chart_data: Any
    chart_options: Optional[Dict[str, Any]] = None
    is_3d: bool
    created_at: Optional[datetime] = None
