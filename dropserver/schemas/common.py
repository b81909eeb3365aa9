"""Common schemas used across multiple endpoints."""

from typing import Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Response model for errors."""
    detail: str
    code: str


class SuccessResponse(BaseModel):
    """Response model for operations without a payload."""
    success: bool = True


class LimitsResponse(CamelModel):
    """Response model for server limits and expiration choices."""
    max_file_size: int
    max_total_files_size: int
    max_files: int
    chunk_size: int
    expiration_options: Dict[str, int]
    default_expiration: str
