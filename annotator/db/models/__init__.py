# annotator/db/models/__init__.py
from .user import User
from .label import Label
from .label_relation import LabelRelation, RelationType
from .document import Document
from .annotation import Annotation
