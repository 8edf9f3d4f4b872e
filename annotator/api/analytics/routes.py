from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from annotator.db.session import get_db
from annotator.core.security import get_current_user
from annotator.db.models.user import User
from . import schemas, services

router = APIRouter()

@router.get("/labels-summary", response_model=schemas.LabelsSummary)
def labels_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Total annotations per label and their average length.
    """
    return services.get_labels_summary(db, current_user.id)

@router.get("/segments", response_model=schemas.TopSegments)
def top_segments(
    label_id: int,
    top_n: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Document segments with the most annotations of the given label.
    """
    return services.get_top_segments(db, label_id, current_user.id, top_n)
