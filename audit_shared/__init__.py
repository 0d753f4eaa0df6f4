"""Shared package for the school audit backend.

This package contains code that does not depend on Flask and can be reused by
import scripts and tests as well as the API. It includes:

- Photo reference normalization (photos.py) - canonical {name, data, type} records
- Database models (models.py) - SQLAlchemy declarative Audit model
- Enums (enums.py) - Classification of incoming photo payloads
- Validation utilities (validation.py, schemas.py) - Coercion, sanitization and pydantic schemas
"""
