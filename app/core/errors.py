"""
Error hierarchy for the config builder.

Hierarchy:
    AppBuilderError                 (base, carries an HTTP status)
    ├── ValidationError             (missing or invalid input, 400)
    │   └── InvalidDatabase         (uploaded file is not a readable SQLite db, 400)
    ├── SchemaMismatch              (reference db lacks required tables, 400)
    ├── StoreUninitialized          (lookup before any reference db is loaded, 400)
    ├── NotFound                    (name/identifier lookup miss, 404)
    └── IOFailure                   (artifact read/write failure, 500)
"""
from typing import Any, Dict, List, Optional


class AppBuilderError(Exception):
    """Base exception for all config builder errors."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Body returned to API callers."""
        return {"error": self.message, "details": self.details}


class ValidationError(AppBuilderError):
    status_code = 400

    def __init__(self, message: str, *, missing: Optional[List[str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.missing = list(missing or [])
        if self.missing and details is None:
            details = {"missing": self.missing}
        super().__init__(message, details=details)

    @classmethod
    def missing_fields(cls, fields: List[str]) -> "ValidationError":
        return cls(f"Missing required parameters: {', '.join(fields)}", missing=fields)


class InvalidDatabase(ValidationError):
    def __init__(self, message: str = "Invalid database file", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class SchemaMismatch(AppBuilderError):
    status_code = 400

    def __init__(self, available_tables: List[str], missing_tables: List[str], required_tables: List[str]):
        self.available_tables = list(available_tables)
        self.missing_tables = list(missing_tables)
        self.required_tables = list(required_tables)
        super().__init__(
            "Database schema not recognized",
            details={
                "availableTables": self.available_tables,
                "missingTables": self.missing_tables,
                "requiredTables": self.required_tables,
            },
        )


class StoreUninitialized(AppBuilderError):
    status_code = 400

    def __init__(self, message: str = "Database schema not initialized. Please upload database first."):
        super().__init__(message)


class NotFound(AppBuilderError):
    status_code = 404

    def __init__(self, entity: str, key: Any, message: Optional[str] = None):
        self.entity = entity
        self.key = key
        super().__init__(
            message or f"{entity[:1].upper()}{entity[1:]} '{key}' not found",
            details={"entity": entity, "key": key},
        )


class IOFailure(AppBuilderError):
    """Artifact storage failure. The caller only sees the generic message."""

    status_code = 500

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
        if cause is not None and not self.__cause__:
            self.__cause__ = cause
