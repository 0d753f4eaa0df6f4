"""Base CRUD class for Flask blueprints."""
from flask import jsonify, request
from typing import Type, Optional, Dict, Any
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from audit_shared.validation import ValidationError, ConflictError
from ..models import db
from ..utils import api_error, handle_api_exception
import logging


class CRUDBase:
    """Base class providing common read/create operations for Flask blueprints.

    Subclasses should override:
    - serialize() - to customize serialization
    - validate_create_data() - to customize creation validation
    """

    def __init__(self, model_class: Type[DeclarativeBase], logger_name: Optional[str] = None):
        """Initialize CRUD base class.

        Args:
            model_class: SQLAlchemy model class
            logger_name: Optional logger name (defaults to class name)
        """
        self.model = model_class
        self.logger = logging.getLogger(logger_name or self.__class__.__name__)

    def get_list(self) -> tuple:
        """Get all resources ordered by primary key.

        Returns:
            Flask JSON response with a list of serialized resources
        """
        resources = db.session.scalars(select(self.model).order_by(self.model.id)).all()
        return jsonify([self.serialize(resource) for resource in resources])

    def get_detail(self, resource_id: int) -> tuple:
        """Get single resource by ID.

        Args:
            resource_id: Primary key ID of the resource

        Returns:
            Flask JSON response with resource data
        """
        resource = db.get_or_404(self.model, resource_id)
        return jsonify(self.serialize(resource))

    def create(self) -> tuple:
        """Create a new resource from the request body.

        Returns:
            Flask JSON response with created resource ID
        """
        try:
            data = self.get_json_data()
            validated_data = self.validate_create_data(data)

            resource = self.model(**validated_data)
            db.session.add(resource)
            db.session.commit()

            self.logger.info(f"Created {self.get_singular_name()}: {resource.id}")

            return jsonify({
                'success': True,
                'id': resource.id,
                'message': f'{self.get_singular_name().title()} created successfully'
            }), 201

        except ConflictError as e:
            return api_error(str(e), 409)
        except ValidationError as e:
            self.logger.warning(f"Validation error in {self.get_singular_name()} creation: {e}")
            return api_error(str(e), 400)
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same identifier
            db.session.rollback()
            return api_error(f'{self.get_singular_name().title()} already exists', 409, details=str(e.orig))
        except HTTPException:
            raise
        except Exception as e:
            db.session.rollback()
            return handle_api_exception(e, f'create {self.get_singular_name()}')

    def serialize(self, resource: DeclarativeBase) -> Dict[str, Any]:
        """Serialize resource to dictionary.

        Subclasses should override this method to customize serialization.

        Args:
            resource: SQLAlchemy model instance

        Returns:
            Dictionary representation of the resource
        """
        result = {}
        for column in resource.__table__.columns:
            value = getattr(resource, column.name)
            if hasattr(value, 'isoformat'):
                result[column.name] = value.isoformat()
            else:
                result[column.name] = value
        return result

    def get_json_data(self) -> Dict[str, Any]:
        """Get and validate JSON data from request.

        Returns:
            Dictionary of request JSON data

        Raises:
            ValidationError: If JSON is invalid or not a dict
            RequestEntityTooLarge: If the body exceeds MAX_CONTENT_LENGTH
        """
        try:
            data = request.get_json()
        except RequestEntityTooLarge:
            raise
        except Exception:
            raise ValidationError('Invalid JSON data')

        if data is None:
            raise ValidationError('Request body must contain valid JSON')
        if not isinstance(data, dict):
            raise ValidationError('Request data must be a JSON object')
        return data

    def validate_create_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate data for creation.

        Subclasses should override this method to add custom validation.

        Args:
            data: Raw request data dictionary

        Returns:
            Validated data dictionary ready for model creation

        Raises:
            ValidationError: If validation fails
        """
        return data

    def get_singular_name(self) -> str:
        """Get singular resource name for messages.

        Returns:
            Singular resource name (e.g., 'audit')
        """
        # Default: remove trailing 's' from table name
        table_name = self.model.__tablename__
        if table_name.endswith('s'):
            return table_name[:-1]
        return table_name
