from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from annotator.db.session import get_db
from annotator.core.security import get_current_user
from annotator.db.models.user import User
from . import schemas, services

router = APIRouter()

@router.post("/", response_model=schemas.AnnotationOut)
def create_annotation(
    payload: schemas.AnnotationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.create_annotation(db, payload, current_user.id)

@router.get("/document/{document_id}", response_model=list[schemas.AnnotationOut])
def get_document_annotations(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.get_document_annotations(db, document_id, current_user.id)

@router.delete("/{annotation_id}")
def delete_annotation(
    annotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    deleted = services.delete_annotation(db, annotation_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Annotation not found or unauthorized")
    return {"success": True, "id": annotation_id}
