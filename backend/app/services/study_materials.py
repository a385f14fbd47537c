"""
Study material data access and file uploads.

Deleting a material removes its stored file first, best effort: a storage
failure is logged and the row is deleted anyway.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from app.models.models import StudyMaterial
from app.schemas import study as schemas
from app.services.context import SessionContext
from app.services.data_access import (
    apply_changes,
    coerce_payload,
    commit,
    mutation,
    run_query,
    serialize,
)
from app.services.exceptions import DataAccessError, NotFound, RemoteError
from app.services.notifications import toaster
from app.services.query_cache import query_cache
from app.services.storage import (
    StorageError,
    bucket_for_material_type,
    bucket_for_path,
    get_storage,
)

logger = logging.getLogger(__name__)


def _owned_material(ctx: SessionContext, material_id: str) -> StudyMaterial:
    user_id = ctx.require_user()
    material = run_query(lambda: ctx.db.query(StudyMaterial).filter(
        StudyMaterial.id == material_id,
        StudyMaterial.user_id == user_id
    ).first())
    if not material:
        raise NotFound("Study material", material_id)
    return material


def list_study_materials(
    ctx: SessionContext,
    study_plan_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Caller's materials by order_index, optionally narrowed to a plan and/or session."""
    user_id = ctx.require_user()

    def fetch():
        query = ctx.db.query(StudyMaterial).filter(StudyMaterial.user_id == user_id)
        if study_plan_id:
            query = query.filter(StudyMaterial.study_plan_id == study_plan_id)
        if session_id:
            query = query.filter(StudyMaterial.session_id == session_id)
        rows = query.order_by(StudyMaterial.order_index.asc(), StudyMaterial.created_at.asc()).all()
        return [serialize(schemas.StudyMaterial, row) for row in rows]

    return query_cache.get_or_fetch(
        "study-materials", user_id, (study_plan_id, session_id), lambda: run_query(fetch)
    )


def get_study_material(ctx: SessionContext, material_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not material_id:
        return None
    user_id = ctx.require_user()

    def fetch():
        return serialize(schemas.StudyMaterial, _owned_material(ctx, material_id))

    return query_cache.get_or_fetch("study-material", user_id, (material_id,), lambda: run_query(fetch))


@mutation(
    "study_material",
    success=("Material Added! 📚", "Study material has been added successfully."),
    failure=("Failed to Add Material", "Failed to create study material"),
)
def create_study_material(ctx: SessionContext, payload) -> Dict[str, Any]:
    user_id = ctx.require_user()
    data = coerce_payload(schemas.StudyMaterialCreate, payload)

    material = StudyMaterial(user_id=user_id, **data)
    ctx.db.add(material)
    commit(ctx.db)
    ctx.db.refresh(material)
    return serialize(schemas.StudyMaterial, material)


@mutation(
    "study_material",
    success=("Material Updated! ✅", "Study material has been updated successfully."),
    failure=("Update Failed", "Failed to update study material"),
)
def update_study_material(ctx: SessionContext, material_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.StudyMaterialUpdate, updates)
    material = _owned_material(ctx, material_id)

    apply_changes(material, changes)
    commit(ctx.db)
    ctx.db.refresh(material)
    return serialize(schemas.StudyMaterial, material)


@mutation(
    "study_material",
    success=("Material Deleted", "Study material has been deleted successfully."),
    failure=("Deletion Failed", "Failed to delete study material"),
    invalidate_ids=lambda material_id: [material_id],
)
def delete_study_material(ctx: SessionContext, material_id: str) -> str:
    user_id = ctx.require_user()

    file_path = run_query(lambda: ctx.db.query(StudyMaterial.file_path).filter(
        StudyMaterial.id == material_id,
        StudyMaterial.user_id == user_id
    ).scalar())

    if file_path:
        try:
            get_storage().remove(bucket_for_path(file_path), [file_path])
        except StorageError as e:
            logger.warning(f"Failed to delete file from storage ({file_path}): {e}")

    run_query(lambda: ctx.db.query(StudyMaterial).filter(
        StudyMaterial.id == material_id,
        StudyMaterial.user_id == user_id
    ).delete(synchronize_session=False))
    commit(ctx.db)
    return material_id


def upload_material_file(
    ctx: SessionContext,
    filename: str,
    data: bytes,
    material_type: str,
    content_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Store an uploaded file in the bucket for its material type.

    The object key is "<user_id>/<epoch millis>.<extension>". Only failures
    raise a toast; the material row is created separately.

    Returns:
        {"path", "bucket", "public_url"}
    """
    bucket = bucket_for_material_type(material_type)
    extension = filename.rsplit(".", 1)[-1]
    storage = get_storage()

    try:
        user_id = ctx.require_user()
        key = f"{user_id}/{int(time.time() * 1000)}.{extension}"
        try:
            path = storage.upload(bucket, key, data, content_type)
        except StorageError as e:
            raise RemoteError(str(e))
    except DataAccessError as e:
        toaster.error(ctx.user_id, "Upload Failed", e, "Failed to upload file")
        raise

    logger.info(f"Uploaded {len(data)} bytes to {bucket}/{path}")
    return schemas.UploadedFile(
        path=path, bucket=bucket, public_url=storage.public_url(bucket, path)
    ).model_dump()


def get_file_url(file_path: Optional[str]) -> Optional[str]:
    """Public URL for a stored path, or None for an empty path."""
    if not file_path:
        return None
    return get_storage().public_url(bucket_for_path(file_path), file_path)
