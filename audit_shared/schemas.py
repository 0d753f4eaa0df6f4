"""Pydantic schemas for audit validation and serialization."""
from datetime import datetime
from typing import Optional, List, Dict, Any
import bleach
from pydantic import BaseModel, Field, field_validator, ConfigDict, ValidationInfo
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from audit_shared.photos import PhotoRecord, normalize_photos
from audit_shared.validation import Validator, ValidationError

TEXT_FIELDS = (
    'school_name', 'local_gov', 'school_address', 'principal_name',
    'facility_condition', 'additional_notes', 'auditor', 'timestamp',
)


def sanitize_html(text: str) -> str:
    """Secure HTML sanitization using bleach library."""
    if not text:
        return text
    if '<' not in text and '>' not in text and '&' not in text:
        return text

    allowed_tags = ['p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li', 'blockquote']
    allowed_attributes = {}
    return bleach.clean(text, tags=allowed_tags, attributes=allowed_attributes, strip=True)


def format_validation_errors(error: PydanticValidationError) -> str:
    """Flatten pydantic errors into a single ``field: message; ...`` string."""
    errors = []
    for item in error.errors():
        field = '.'.join(str(x) for x in item['loc'])
        errors.append(f"{field}: {item['msg']}")
    return '; '.join(errors)


# Audit Schemas
class AuditBase(BaseModel):
    school_name: str = Field(default="")
    local_gov: str = Field(default="")
    school_address: str = Field(default="")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    principal_name: str = Field(default="")
    total_teachers: int = Field(default=0)
    total_students: int = Field(default=0)
    facility_condition: str = Field(default="")
    additional_notes: str = Field(default="")
    photos: List[PhotoRecord] = Field(default_factory=list)
    auditor: str = Field(default="")
    timestamp: str = Field(default="")

    @field_validator(*TEXT_FIELDS, mode='before')
    @classmethod
    def coerce_text_fields(cls, v):
        # Spreadsheet exports send numbers for names and blanks as null
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('photos', mode='before')
    @classmethod
    def normalize_photo_field(cls, v):
        return normalize_photos(v)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuditCreate(AuditBase):
    id: int = Field(default=None, validate_default=True)

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        try:
            return Validator.validate_audit_id(v)
        except ValidationError as e:
            raise ValueError(str(e))

    @field_validator('total_teachers', 'total_students', mode='before')
    @classmethod
    def coerce_counts(cls, v):
        return Validator.coerce_count(v)

    @field_validator('latitude', 'longitude', mode='before')
    @classmethod
    def coerce_coordinates(cls, v, info: ValidationInfo):
        try:
            return Validator.coerce_coordinate(v, info.field_name)
        except ValidationError as e:
            raise ValueError(str(e))

    @field_validator(*TEXT_FIELDS)
    @classmethod
    def sanitize_text_fields(cls, v):
        return sanitize_html(v).strip()


class AuditResponse(AuditBase):
    id: int
    synced: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def parse_audit_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a raw audit payload and return column values ready for storage.

    Raises:
        ValidationError: If the payload cannot be stored
    """
    try:
        audit = AuditCreate.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e))

    validated_data = audit.model_dump()
    validated_data['synced'] = True
    return validated_data
