from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from core.auth import get_current_user, get_settings
from core.config import Settings
from core.database import get_db
from core.errors import NotFoundError, ValidationError
from core.storage import FileStore, get_file_store
from crud.folder_crud import create_folder, get_folder, list_folders
from crud.project_crud import list_projects
from schemas.folder_schema import FolderCreate, FolderResponse
from schemas.project_schema import (
    ProjectMove,
    ProjectMoveResponse,
    ProjectMutationResponse,
    ProjectPreviewResponse,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
)
from services import project_service


router = APIRouter(prefix="/api/projects", tags=["Projects"], dependencies=[Depends(get_current_user)])


# Folder routes come first so "/folders" is never read as a project id


@router.post("/folders", response_model=FolderResponse, status_code=201)
def create_one_folder(payload: FolderCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    name = (payload.name or "").strip()
    if not name:
        raise ValidationError("Folder name is required")
    return create_folder(db, current_user.id, name)


@router.get("/folders", response_model=list[FolderResponse])
def list_all_folders(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return list_folders(db, current_user.id)


@router.get("/folders/{folder_id}/projects", response_model=list[ProjectResponse])
def list_folder_projects(folder_id: str, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    if not get_folder(db, folder_id, current_user.id):
        raise NotFoundError("Folder not found")
    return list_projects(db, current_user.id, folder_id=folder_id, limit=None)


@router.post("", response_model=ProjectMutationResponse, status_code=201)
def create(
    excel_file: UploadFile | None = File(None, alias="excelFile"),
    project_name: str | None = Form(None, alias="projectName"),
    chart_type: str | None = Form(None, alias="chartType"),
    x_axis: str | None = Form(None, alias="xAxis"),
    y_axis: str | None = Form(None, alias="yAxis"),
    bubble_size: str | None = Form(None, alias="bubbleSize"),
    db: Session = Depends(get_db),
    files: FileStore = Depends(get_file_store),
    settings: Settings = Depends(get_settings),
    current_user = Depends(get_current_user),
):
    content = project_service.read_upload(excel_file, settings)
    proj = project_service.create_chart_project(
        db,
        files,
        current_user.id,
        project_name=project_name,
        chart_type=chart_type,
        x_axis=x_axis,
        y_axis=y_axis,
        bubble_size=bubble_size,
        filename=excel_file.filename,
        content_type=excel_file.content_type,
        content=content,
    )
    return {"message": "Project created successfully", "project": proj}


@router.get("", response_model=list[ProjectSummary])
def list_all(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user),
):
    return list_projects(db, current_user.id, skip=skip, limit=limit)


@router.get("/{project_id}", response_model=ProjectResponse)
def read_one(project_id: str, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return project_service.get_owned_project(db, project_id, current_user.id)


@router.get("/{project_id}/preview", response_model=ProjectPreviewResponse)
def read_preview(project_id: str, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    proj = project_service.get_owned_project(db, project_id, current_user.id)
    return {"preview": proj.preview_data or []}


@router.put("/{project_id}", response_model=ProjectMutationResponse)
def update(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    files: FileStore = Depends(get_file_store),
    current_user = Depends(get_current_user),
):
    proj = project_service.get_owned_project(db, project_id, current_user.id)
    proj = project_service.update_chart_project(db, files, proj, payload)
    return {"message": "Project updated successfully", "project": proj}


@router.delete("/{project_id}")
def delete(
    project_id: str,
    db: Session = Depends(get_db),
    files: FileStore = Depends(get_file_store),
    current_user = Depends(get_current_user),
):
    project_service.delete_chart_project(db, files, project_id, current_user.id)
    return {"message": "Project deleted successfully"}


@router.post("/{project_id}/duplicate", response_model=ProjectMutationResponse, status_code=201)
def duplicate(
    project_id: str,
    db: Session = Depends(get_db),
    files: FileStore = Depends(get_file_store),
    current_user = Depends(get_current_user),
):
    proj = project_service.duplicate_chart_project(db, files, project_id, current_user.id)
    return {"message": "Project duplicated successfully", "project": proj}


@router.put("/{project_id}/move", response_model=ProjectMoveResponse)
def move(project_id: str, payload: ProjectMove, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    proj = project_service.move_chart_project(db, project_id, current_user.id, payload.folder_id)
    return {"message": "Project moved successfully", "project": proj}
