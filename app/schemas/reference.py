from datetime import datetime
from typing import Dict, List, Optional
from pydantic import Field
from app.schemas.common import CamelModel


class UploadResponse(CamelModel):
    message: str
    db_path: str
    store_id: str
    db_schema: Dict[str, str] = Field(alias="schema")


class DeleteResponse(CamelModel):
    message: str
    db_path: str


class SchemaReportResponse(CamelModel):
    available_tables: List[str]
    required_tables: List[str]
    found_tables: List[str]
    missing_tables: List[str]
    is_valid: bool


class ObjectClassOut(CamelModel):
    class_lang_id: int
    class_id: int
    name: str
    description: Optional[str] = None


class ObjectClassesResponse(CamelModel):
    object_classes: List[ObjectClassOut]
    count: int


class HealthResponse(CamelModel):
    status: str
    timestamp: datetime
    uploads_dir: bool
    output_dir: bool
    db_schema: Optional[Dict[str, object]] = None
