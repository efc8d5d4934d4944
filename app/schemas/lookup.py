from typing import List, Optional
from pydantic import Field
from app.schemas.common import CamelModel


class ClassIdsRequest(CamelModel):
    child_object_name: str = Field("", examples=["Gen1"])
    child_class_name: str = Field("", examples=["Generator"])
    parent_object_name: str = "System"


class ClassIdsResponse(CamelModel):
    child_class_lang_id: int
    parent_class_lang_id: int
    child_object_name: str
    parent_object_name: str
    child_class_id: int
    child_class_name: str


class PropertiesRequest(CamelModel):
    child_class_id: Optional[int] = Field(None, examples=[3])
    parent_class_id: int = 1


class PropertyOut(CamelModel):
    property_lang_id: int
    name: str
    description: Optional[str] = None


class PropertiesResponse(CamelModel):
    properties: List[PropertyOut]
    count: int
    collection_id: int
