import logging

from sqlalchemy.orm import Session
from annotator.db.models.label import Label
from . import schemas
from .hierarchy import detach_label, lock_owner_hierarchy

logger = logging.getLogger(__name__)

def create_label(db: Session, label: schemas.LabelCreate, user_id: int):
    db_label = Label(**label.model_dump(), user_id=user_id)
    db.add(db_label)
    db.commit()
    db.refresh(db_label)
    return db_label

def get_labels(db: Session, user_id: int):
    return db.query(Label).filter(Label.user_id == user_id).order_by(Label.id).all()

def get_label(db: Session, label_id: int, user_id: int):
    return db.query(Label).filter(Label.id == label_id, Label.user_id == user_id).first()

def get_labels_by_ids(db: Session, label_ids: list, user_id: int):
    """Owned labels for ``label_ids``, in the order the ids were given."""
    found = {
        label.id: label
        for label in db.query(Label).filter(Label.id.in_(label_ids), Label.user_id == user_id)
    }
    return [found[label_id] for label_id in label_ids if label_id in found]

def update_label(db: Session, label_id: int, label: schemas.LabelUpdate, user_id: int):
    db_label = get_label(db, label_id, user_id)
    if db_label:
        for key, value in label.model_dump(exclude_unset=True).items():
            setattr(db_label, key, value)
        db.commit()
        db.refresh(db_label)
    return db_label

def delete_label(db: Session, label_id: int, user_id: int):
    """Delete a label, moving its children up to its parent.

    Returns the ids of the former children, or None when the label is not found.
    """
    lock_owner_hierarchy(db, user_id)
    db_label = get_label(db, label_id, user_id)
    if not db_label:
        db.rollback()
        return None

    try:
        children = detach_label(db, label_id)
        db.delete(db_label)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Deleted label %s (user %s), re-linked children %s", label_id, user_id, children)
    return children
