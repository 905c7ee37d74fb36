"""
app/mappers package marker.
"""

from app.mappers.schema_mapper import (
    CANONICAL_FIELDS,
    REQUIRED_CANONICAL_FIELDS,
    MappingResolution,
    UploadSchemaMapper,
)

__all__ = [
    "CANONICAL_FIELDS",
    "REQUIRED_CANONICAL_FIELDS",
    "MappingResolution",
    "UploadSchemaMapper",
]
