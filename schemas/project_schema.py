from datetime import datetime
from enum import Enum
from typing import Any

from schemas.base_schema import CamelModel


class ChartType(str, Enum):
    bar = "bar"
    line = "line"
    pie = "pie"
    doughnut = "doughnut"
    radar = "radar"
    scatter = "scatter"
    bubble = "bubble"
    mixed = "mixed"
    polar_area = "polarArea"


class ChartConfig(CamelModel):
    """Axis bindings. Extra client-side display settings are kept as-is."""

    x_axis: str | None = None
    y_axis: str | None = None
    bubble_size: str | None = None

    model_config = {**CamelModel.model_config, "extra": "allow"}


class ProjectUpdate(CamelModel):
    project_name: str | None = None
    chart_type: ChartType | None = None
    chart_config: ChartConfig | None = None


class ProjectMove(CamelModel):
    folder_id: str | None = None


class ProjectBrief(CamelModel):
    id: str
    project_name: str
    chart_type: str
    original_file_name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectSummary(ProjectBrief):
    folder_id: str | None = None


class ProjectResponse(ProjectSummary):
    user_id: str
    file_path: str
    data: list[dict[str, Any]] | None = None
    preview_data: list[dict[str, Any]] = []
    chart_config: dict[str, Any] = {}


class ProjectMutationResponse(CamelModel):
    message: str
    project: ProjectBrief


class ProjectMoveResponse(CamelModel):
    message: str
    project: ProjectResponse


class ProjectPreviewResponse(CamelModel):
    preview: list[dict[str, Any]]
