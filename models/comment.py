from pydantic import BaseModel, Field
from typing import Optional, Literal, Union
from datetime import datetime
from models.base import StoredObject
from models.report import IssueReport

class CommentMetadata(BaseModel):
    content: str
    author_name: str
    author_email: str
    issue_report: Union[IssueReport, str]  # Reporte expandido o su id
    is_internal: bool = False  # Solo visible para el personal
    created_date: Optional[datetime] = None

# Comentario sobre un reporte (solo se agregan, nunca se editan)
class Comment(StoredObject):
    type: Literal["comments"] = "comments"
    metadata: CommentMetadata

# Lo que envía el frontend para comentar un reporte
class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    author_name: str = Field(..., min_length=1)
    author_email: str
    is_internal: bool = False
