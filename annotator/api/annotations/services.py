from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload
from annotator.db.models.annotation import Annotation
from annotator.db.models.document import Document
from annotator.db.models.label import Label
from . import schemas


def _to_out(annotation: Annotation) -> dict:
    return {
        "id": annotation.id,
        "document_id": annotation.document_id,
        "label_id": annotation.label_id,
        "start_offset": annotation.start_offset,
        "end_offset": annotation.end_offset,
        "selected_text": annotation.selected_text,
        "user_id": annotation.user_id,
        "label_name": annotation.label.name if annotation.label else None,
        "label_color": annotation.label.color if annotation.label else None,
        "created_at": annotation.created_at,
    }


def create_annotation(db: Session, payload: schemas.AnnotationCreate, user_id: int):
    document = db.query(Document).filter(
        Document.id == payload.document_id, Document.user_id == user_id
    ).first()
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")

    label = db.query(Label).filter(Label.id == payload.label_id, Label.user_id == user_id).first()
    if not label:
        raise HTTPException(status_code=404, detail="Label not found")

    if payload.end_offset > len(document.content):
        raise HTTPException(status_code=400, detail="Annotation span is outside the document")

    selected_text = payload.selected_text
    if selected_text is None:
        selected_text = document.content[payload.start_offset:payload.end_offset]

    annotation = Annotation(
        document_id=document.id,
        label_id=label.id,
        start_offset=payload.start_offset,
        end_offset=payload.end_offset,
        selected_text=selected_text,
        user_id=user_id,
    )
    db.add(annotation)
    db.commit()
    db.refresh(annotation)
    return _to_out(annotation)


def get_document_annotations(db: Session, document_id: int, user_id: int):
    annotations = (
        db.query(Annotation)
        .options(joinedload(Annotation.label))
        .filter(Annotation.document_id == document_id, Annotation.user_id == user_id)
        .order_by(Annotation.start_offset, Annotation.id)
        .all()
    )
    return [_to_out(annotation) for annotation in annotations]


def delete_annotation(db: Session, annotation_id: int, user_id: int):
    annotation = db.query(Annotation).filter(
        Annotation.id == annotation_id, Annotation.user_id == user_id
    ).first()
    if annotation:
        db.delete(annotation)
        db.commit()
    return annotation
