from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union
from models.base import StoredObject, Photo
from models.enums import IssueCategory

class DepartmentMetadata(BaseModel):
    description: Optional[str] = None
    contact_email: str
    phone: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    categories: List[IssueCategory] = Field(default_factory=list)

# Departamento municipal (datos de referencia, solo lectura)
class Department(StoredObject):
    type: Literal["departments"] = "departments"
    metadata: DepartmentMetadata

class StaffMemberMetadata(BaseModel):
    email: str
    phone: Optional[str] = None
    # Objeto expandido con depth=1, o el id/nombre tal como se guardó
    department: Optional[Union[Department, str]] = None
    role: Optional[str] = None
    avatar: Optional[Photo] = None

# Personal municipal al que se asignan reportes
class StaffMember(StoredObject):
    type: Literal["staff-members"] = "staff-members"
    metadata: StaffMemberMetadata

class CategoryMetadata(BaseModel):
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    department: Optional[Union[Department, str]] = None

# Categoría de incidencia con su presentación y departamento responsable
class Category(StoredObject):
    type: Literal["categories"] = "categories"
    metadata: CategoryMetadata
