from pydantic import BaseModel, field_validator
from typing import Optional, List

from annotator.db.models.label_relation import RelationType

class LabelBase(BaseModel):
    name: str
    color: Optional[str] = None

class LabelCreate(LabelBase):
    pass

class LabelUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        # Omit the field to keep the current name
        if value is None:
            raise ValueError("name cannot be null")
        return value

class LabelOut(LabelBase):
    id: int
    user_id: int

    model_config = {
        "from_attributes": True
    }

class LabelDeleted(BaseModel):
    message: str
    reparented: List[int] = []  # children moved up to the deleted label's parent


# ---------------------------
# Hierarchy
# ---------------------------

class LabelTreeNode(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    children: List["LabelTreeNode"] = []

class BreadcrumbItem(BaseModel):
    id: int
    name: str

class RelationCreate(BaseModel):
    # Checked by the hierarchy engine so its message reaches the client
    relation_type: str = RelationType.PARENT_TO_CHILD.value

class RelationOut(BaseModel):
    id: int
    parent_id: int
    child_id: int

class RelationRemoved(BaseModel):
    success: bool
    message: str

class RelationCheck(BaseModel):
    valid: bool
    error: Optional[str] = None


LabelTreeNode.model_rebuild()
