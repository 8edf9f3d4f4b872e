from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

class AnnotationCreate(BaseModel):
    document_id: int
    label_id: int
    start_offset: int = Field(ge=0)
    end_offset: int = Field(gt=0)
    selected_text: Optional[str] = None  # defaults to the document slice

    @model_validator(mode="after")
    def check_span(self):
        if self.end_offset <= self.start_offset:
            raise ValueError("end_offset must be greater than start_offset")
        return self

class AnnotationOut(BaseModel):
    id: int
    document_id: int
    label_id: int
    start_offset: int
    end_offset: int
    selected_text: Optional[str] = None
    user_id: int
    label_name: Optional[str] = None
    label_color: Optional[str] = None
    created_at: Optional[datetime] = None
