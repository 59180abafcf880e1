"""
Unión etiquetada de los objetos del almacén de contenido.

El campo `type` discrimina la variante, así cada documento se valida contra
su esquema cerrado al cruzar la frontera del almacén.
"""
from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from models.comment import Comment
from models.department import Category, Department, StaffMember
from models.report import IssueReport

ContentObject = Annotated[
    Union[IssueReport, Department, StaffMember, Category, Comment],
    Field(discriminator="type"),
]

_content_object_adapter = TypeAdapter(ContentObject)


def parse_object(document: dict) -> ContentObject:
    return _content_object_adapter.validate_python(document)
