import copy
import logging

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import Settings
from core.errors import NotFoundError, ValidationError
from core.spreadsheet import (
    ALLOWED_MIME_TYPES,
    build_chart_config,
    drop_empty_rows,
    ingest,
    project_records,
    read_grid,
    rows_to_records,
)
from core.storage import FileStore
from crud.folder_crud import get_folder
from crud.project_crud import create_project, delete_project, get_project, update_project
from models.project import Project
from schemas.project_schema import ChartType, ProjectUpdate

logger = logging.getLogger(__name__)

AXIS_FIELDS = ("xAxis", "yAxis", "bubbleSize")


def read_upload(upload: UploadFile | None, settings: Settings) -> bytes:
    """Gate an upload on type and size before anything parses it."""
    if upload is None or not upload.filename:
        raise ValidationError("Excel file is required")
    if upload.content_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Only Excel files (.xlsx, .xls) and CSV files are allowed")

    content = upload.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise ValidationError(f"File too large (max {limit_mb}MB)")
    return content


def parse_chart_type(value: str | None) -> ChartType:
    try:
        return ChartType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in ChartType)
        raise ValidationError(f"chartType must be one of: {allowed}")


def get_owned_project(db: Session, project_id: str, user_id: str) -> Project:
    proj = get_project(db, project_id, user_id)
    if not proj:
        raise NotFoundError("Project not found")
    return proj


def create_chart_project(
    db: Session,
    files: FileStore,
    user_id: str,
    *,
    project_name: str | None,
    chart_type: str | None,
    x_axis: str | None,
    y_axis: str | None,
    bubble_size: str | None,
    filename: str,
    content_type: str | None,
    content: bytes,
) -> Project:
    project_name = (project_name or "").strip()
    if not project_name:
        raise ValidationError("projectName is required")
    chart = parse_chart_type(chart_type)

    result = ingest(content, filename, content_type, chart.value, x_axis, y_axis, bubble_size)

    file_key = files.save(content, filename)
    try:
        proj = create_project(
            db,
            user_id,
            project_name=project_name,
            chart_type=chart.value,
            file_path=file_key,
            original_file_name=filename,
            content_type=content_type,
            data=result.data,
            preview_data=result.preview,
            chart_config=result.chart_config,
        )
    except SQLAlchemyError:
        db.rollback()
        files.delete(file_key)
        raise
    logger.info("Created project %s for user %s from %s (%d rows)", proj.id, user_id, filename, len(result.data))
    return proj


def _rederive_data(files: FileStore, proj: Project, chart_config: dict) -> list[dict]:
    if proj.file_path and files.exists(proj.file_path):
        grid = drop_empty_rows(read_grid(files.read(proj.file_path), proj.original_file_name, proj.content_type))
        return project_records(rows_to_records(grid), chart_config)
    # Upload is gone; narrow what is already stored
    return project_records(proj.data or [], chart_config)


def update_chart_project(db: Session, files: FileStore, proj: Project, payload: ProjectUpdate) -> Project:
    fields = {}
    if payload.project_name:
        fields["project_name"] = payload.project_name.strip()
    if payload.chart_type:
        fields["chart_type"] = payload.chart_type.value
    if payload.chart_type or payload.chart_config is not None:
        chart_type = fields.get("chart_type", proj.chart_type)
        if payload.chart_config is not None:
            requested = payload.chart_config.model_dump(by_alias=True, exclude_none=True)
        else:
            requested = dict(proj.chart_config or {})
        # Display settings ride along; the axis keys follow the chart type's rules
        chart_config = {k: v for k, v in requested.items() if k not in AXIS_FIELDS}
        chart_config.update(
            build_chart_config(
                chart_type,
                requested.get("xAxis"),
                requested.get("yAxis"),
                requested.get("bubbleSize"),
            )
        )
        fields["chart_config"] = chart_config
        fields["data"] = _rederive_data(files, proj, chart_config)
    if not fields:
        return proj
    return update_project(db, proj, **fields)


def delete_chart_project(db: Session, files: FileStore, project_id: str, user_id: str) -> None:
    proj = get_owned_project(db, project_id, user_id)
    file_key = proj.file_path
    delete_project(db, project_id, user_id)
    if file_key:
        try:
            files.delete(file_key)
        except OSError:
            # The record is already gone; a stray file is not worth failing the request
            logger.exception("Could not remove file %s of deleted project %s", file_key, project_id)
    logger.info("Deleted project %s", project_id)


def duplicate_chart_project(db: Session, files: FileStore, project_id: str, user_id: str) -> Project:
    original = get_owned_project(db, project_id, user_id)

    file_key = original.file_path
    if file_key and files.exists(file_key):
        file_key = files.copy(file_key)
    else:
        logger.warning("File %s of project %s is missing; duplicate will share the path", file_key, project_id)

    duplicate = create_project(
        db,
        user_id,
        project_name=f"{original.project_name} (Copy)",
        chart_type=original.chart_type,
        file_path=file_key,
        original_file_name=f"Copy of {original.original_file_name}",
        content_type=original.content_type,
        data=copy.deepcopy(original.data),
        preview_data=copy.deepcopy(original.preview_data),
        chart_config=copy.deepcopy(original.chart_config),
        folder_id=original.folder_id,
    )
    logger.info("Duplicated project %s as %s", project_id, duplicate.id)
    return duplicate


def move_chart_project(db: Session, project_id: str, user_id: str, folder_id: str | None) -> Project:
    proj = get_owned_project(db, project_id, user_id)
    folder_id = folder_id or None
    if folder_id is not None and not get_folder(db, folder_id, user_id):
        raise NotFoundError("Folder not found")
    return update_project(db, proj, folder_id=folder_id)
