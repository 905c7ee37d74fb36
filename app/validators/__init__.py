"""
app/validators package marker.
"""

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError
from app.validators.upload_validator import UploadRowValidator, parse_flexible_number

__all__ = [
    "MappingErrorDetail",
    "MappingValidator",
    "SchemaMappingError",
    "UploadRowValidator",
    "parse_flexible_number",
]
