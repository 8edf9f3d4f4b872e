from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from annotator.db.session import get_db
from annotator.core.security import get_current_user
from annotator.db.models.user import User
from annotator.db.models.label_relation import RelationType
from . import schemas, services, hierarchy

router = APIRouter()

@router.post("/", response_model=schemas.LabelOut)
def create_label(
    label: schemas.LabelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.create_label(db, label, current_user.id)

@router.get("/", response_model=list[schemas.LabelOut])
def get_my_labels(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.get_labels(db, current_user.id)

@router.get("/hierarchy/all", response_model=list[schemas.LabelTreeNode])
def get_label_hierarchy(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    All of the user's root labels, each with its full subtree.
    """
    return hierarchy.get_all_root_labels(db, current_user.id)

@router.get("/{label_id}", response_model=schemas.LabelOut)
def get_label(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    label = services.get_label(db, label_id, current_user.id)
    if not label:
        raise HTTPException(status_code=404, detail="Label not found")
    return label

@router.put("/{label_id}", response_model=schemas.LabelOut)
def update_label(
    label_id: int,
    label: schemas.LabelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = services.update_label(db, label_id, label, current_user.id)
    if not updated:
        raise HTTPException(status_code=404, detail="Label not found")
    return updated

@router.delete("/{label_id}", response_model=schemas.LabelDeleted)
def delete_label(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    children = services.delete_label(db, label_id, current_user.id)
    if children is None:
        raise HTTPException(status_code=404, detail="Label not found")
    return {"message": "Label deleted", "reparented": children}

# ---------------------------
# Hierarchy
# ---------------------------

@router.get("/{label_id}/tree", response_model=schemas.LabelTreeNode)
def get_label_tree(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return hierarchy.build_label_tree(db, label_id, current_user.id)

@router.get("/{label_id}/parent")
def get_parent(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not services.get_label(db, label_id, current_user.id):
        raise HTTPException(status_code=404, detail="Label not found")

    parent_id = hierarchy.get_direct_parent(db, label_id)
    parent = services.get_label(db, parent_id, current_user.id) if parent_id is not None else None
    if parent is None:
        return {"parent_id": None}
    return parent.to_dict()

@router.get("/{label_id}/children", response_model=list[schemas.LabelOut])
def get_children(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not services.get_label(db, label_id, current_user.id):
        raise HTTPException(status_code=404, detail="Label not found")

    child_ids = hierarchy.get_direct_children(db, label_id)
    return services.get_labels_by_ids(db, child_ids, current_user.id)

@router.get("/{label_id}/path", response_model=list[schemas.BreadcrumbItem])
def get_path(
    label_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Breadcrumb from the root label down to this one.
    """
    return hierarchy.get_path_to_root(db, label_id, current_user.id)

@router.get("/{parent_id}/can-add-child/{child_id}", response_model=schemas.RelationCheck)
def check_child(
    parent_id: int,
    child_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return hierarchy.can_add_child(db, parent_id, child_id, current_user.id)

@router.post("/{parent_id}/add-child/{child_id}", response_model=schemas.RelationOut)
def add_child(
    parent_id: int,
    child_id: int,
    payload: Optional[schemas.RelationCreate] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    relation_type = payload.relation_type if payload else RelationType.PARENT_TO_CHILD
    return hierarchy.add_parent_child(db, parent_id, child_id, current_user.id, relation_type)

@router.delete("/{parent_id}/remove-child/{child_id}", response_model=schemas.RelationRemoved)
def remove_child(
    parent_id: int,
    child_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return hierarchy.remove_parent_child(db, parent_id, child_id, current_user.id)
