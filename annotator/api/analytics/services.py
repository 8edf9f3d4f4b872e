"""Annotation statistics per label and per fixed-size document segment."""
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from annotator.config import settings
from annotator.db.models.annotation import Annotation
from annotator.db.models.document import Document
from annotator.db.models.label import Label


def segments_for_span(start_offset: int, end_offset: int, segment_size: int) -> List[int]:
    """Indices of the segments that the span ``[start_offset, end_offset)`` overlaps."""
    if end_offset <= start_offset:
        return []
    first = start_offset // segment_size
    last = (end_offset - 1) // segment_size
    return list(range(first, last + 1))


def annotation_length(annotation: Annotation) -> int:
    if annotation.selected_text:
        return len(annotation.selected_text)
    return annotation.end_offset - annotation.start_offset


def get_labels_summary(db: Session, user_id: int) -> dict:
    labels = db.query(Label).filter(Label.user_id == user_id).order_by(Label.id).all()
    annotations = (
        db.query(Annotation)
        .join(Document, Annotation.document_id == Document.id)
        .filter(Document.user_id == user_id)
        .all()
    )

    by_label = {label.id: [] for label in labels}
    for annotation in annotations:
        if annotation.label_id in by_label:
            by_label[annotation.label_id].append(annotation)

    stats = []
    for label in labels:
        label_annotations = by_label[label.id]
        count = len(label_annotations)
        total_length = sum(annotation_length(a) for a in label_annotations)
        stats.append({
            "id": label.id,
            "name": label.name,
            "color": label.color,
            "count": count,
            "average_length": round(total_length / count, 2) if count else 0.0,
            "total_length": total_length,
        })

    # Stable sort keeps label order among equal counts
    stats.sort(key=lambda item: item["count"], reverse=True)

    return {
        "total_annotations": len(annotations),
        "total_labels": len(labels),
        "labels": stats,
    }


def get_top_segments(db: Session, label_id: int, user_id: int, top_n: int = 10) -> dict:
    label = db.query(Label).filter(Label.id == label_id, Label.user_id == user_id).first()
    if not label:
        raise HTTPException(status_code=403, detail="Label not found or not owned by user")

    segment_size = settings.SEGMENT_SIZE
    segments = {}
    documents = db.query(Document).filter(Document.user_id == user_id).order_by(Document.id).all()

    for document in documents:
        annotations = (
            db.query(Annotation)
            .filter(Annotation.document_id == document.id, Annotation.label_id == label_id)
            .order_by(Annotation.id)
            .all()
        )

        for annotation in annotations:
            for index in segments_for_span(annotation.start_offset, annotation.end_offset, segment_size):
                key = (document.id, index)
                if key not in segments:
                    start_char = index * segment_size
                    end_char = min(start_char + segment_size, len(document.content))
                    segments[key] = {
                        "document_id": document.id,
                        "segment_index": index,
                        "start_char": start_char,
                        "end_char": end_char,
                        "text": document.content[start_char:end_char],
                        "annotation_count": 0,
                        "annotation_ids": [],
                    }
                segments[key]["annotation_count"] += 1
                segments[key]["annotation_ids"].append(annotation.id)

    top = sorted(segments.values(), key=lambda s: s["annotation_count"], reverse=True)[:top_n]
    return {"label_id": label_id, "top_segments": top}
