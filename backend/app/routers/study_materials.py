"""
Study Material API Router

Material records plus file upload to object storage.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from app.dependencies.auth import get_session_context
from app.schemas import study as schemas
from app.services.context import SessionContext
from app.services import study_materials

router = APIRouter(prefix="/api/study-materials", tags=["study-materials"])


@router.get("", response_model=List[schemas.StudyMaterial])
def list_materials(
    study_plan_id: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
):
    """Materials by order_index, optionally for one plan and/or session."""
    return study_materials.list_study_materials(ctx, study_plan_id, session_id)


@router.post("", response_model=schemas.StudyMaterial, status_code=status.HTTP_201_CREATED)
def create_material(payload: schemas.StudyMaterialCreate, ctx: SessionContext = Depends(get_session_context)):
    return study_materials.create_study_material(ctx, payload)


@router.post("/upload", response_model=schemas.UploadedFile, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile = File(...),
    material_type: str = Form(...),
    ctx: SessionContext = Depends(get_session_context),
):
    """Store a file in the bucket for its material type. Create the material row separately."""
    data = file.file.read()
    return study_materials.upload_material_file(
        ctx, file.filename or "upload", data, material_type, file.content_type
    )


@router.get("/file-url")
def file_url(path: str = Query(""), ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    ctx.require_user()
    return {"path": path, "public_url": study_materials.get_file_url(path)}


@router.get("/{material_id}", response_model=schemas.StudyMaterial)
def get_material(material_id: str, ctx: SessionContext = Depends(get_session_context)):
    return study_materials.get_study_material(ctx, material_id)


@router.patch("/{material_id}", response_model=schemas.StudyMaterial)
def update_material(material_id: str, updates: schemas.StudyMaterialUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_materials.update_study_material(ctx, material_id, updates)


@router.delete("/{material_id}")
def delete_material(material_id: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    """Removes the stored file (best effort) and then the record."""
    study_materials.delete_study_material(ctx, material_id)
    return {"id": material_id, "deleted": True}
