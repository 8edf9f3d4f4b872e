from pydantic import BaseModel
from typing import List, Optional

class LabelStats(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    count: int
    average_length: float
    total_length: int

class LabelsSummary(BaseModel):
    total_annotations: int
    total_labels: int
    labels: List[LabelStats]

class SegmentStats(BaseModel):
    document_id: int
    segment_index: int
    start_char: int
    end_char: int
    text: str
    annotation_count: int
    annotation_ids: List[int]

class TopSegments(BaseModel):
    label_id: int
    top_segments: List[SegmentStats]
