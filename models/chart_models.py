from typing import List
from pydantic import BaseModel, ConfigDict, Field


class ColorPair(BaseModel):
    background: str
    border: str


class ChartDataset(BaseModel):
    """One Chart.js dataset; field aliases match the Chart.js config keys."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    data: List[float] = []
    background_color: List[str] = Field(default_factory=list, alias="backgroundColor")
    border_color: List[str] = Field(default_factory=list, alias="borderColor")


class ChartData2D(BaseModel):
    labels: List[str] = []
    datasets: List[ChartDataset] = []


class Point3D(BaseModel):
    x: float
    y: float
    z: float
    label: str

