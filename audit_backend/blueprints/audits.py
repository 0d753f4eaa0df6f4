"""Audits blueprint for Flask API."""
from flask import Blueprint, jsonify
from sqlalchemy import select, func
from werkzeug.exceptions import HTTPException
from ..models import db, Audit
from ..base.crud_base import CRUDBase
from ..utils import api_error, handle_api_exception
from audit_shared.schemas import AuditResponse, parse_audit_payload
from audit_shared.validation import Validator, ValidationError, ConflictError
bp = Blueprint('audits', __name__, url_prefix='/api')


class AuditCRUD(CRUDBase):
    """CRUD operations for Audit model."""

    def __init__(self):
        super().__init__(Audit, logger_name='audits')

    def serialize(self, audit):
        """Serialize audit to a camelCase dictionary using Pydantic."""
        return AuditResponse.model_validate(audit).model_dump(mode='json', by_alias=True)

    def validate_create_data(self, data):
        """Validate and prepare data for audit creation."""
        validated_data = parse_audit_payload(data)

        audit_id = validated_data['id']
        if db.session.get(Audit, audit_id) is not None:
            raise ConflictError(f'Audit with id {audit_id} already exists')

        return validated_data

    def sync(self):
        """Store a batch of audits collected offline.

        Audits whose id is already stored, or repeated earlier in the same
        batch, are skipped, as are audits that fail validation. The remaining
        audits are inserted in one transaction.
        """
        try:
            data = self.get_json_data()
            payloads = data.get('audits')
            if not isinstance(payloads, list):
                raise ValidationError('Invalid audits array')

            known_ids = set(db.session.scalars(select(Audit.id)))
            new_audits = []
            skipped = 0

            for index, payload in enumerate(payloads):
                try:
                    if not isinstance(payload, dict):
                        raise ValidationError('audit must be a JSON object')
                    audit_id = Validator.validate_audit_id(payload.get('id'))
                    if audit_id in known_ids:
                        skipped += 1
                        continue
                    validated_data = parse_audit_payload(payload)
                except ValidationError as e:
                    self.logger.warning(f"Skipping audit at index {index} of sync batch: {e}")
                    skipped += 1
                    continue

                known_ids.add(audit_id)
                new_audits.append(Audit(**validated_data))

            if new_audits:
                db.session.add_all(new_audits)
                db.session.commit()

            total_audits = db.session.scalar(select(func.count()).select_from(Audit))
            self.logger.info(f"Synced {len(new_audits)} new audits ({skipped} skipped, {total_audits} total)")

            return jsonify({
                'success': True,
                'message': f'Synced {len(new_audits)} new audits',
                'synced': len(new_audits),
                'skipped': skipped,
                'totalAudits': total_audits
            })

        except ValidationError as e:
            self.logger.warning(f"Validation error in audit sync: {e}")
            return api_error(str(e), 400)
        except HTTPException:
            raise
        except Exception as e:
            db.session.rollback()
            return handle_api_exception(e, 'sync audits')


# Create CRUD instance
audit_crud = AuditCRUD()


@bp.route('/audits', methods=['GET'])
def get_audits():
    """Get all audits."""
    return audit_crud.get_list()


@bp.route('/audits/<int:audit_id>', methods=['GET'])
def get_audit(audit_id):
    """Get single audit by ID."""
    return audit_crud.get_detail(audit_id)


@bp.route('/audits', methods=['POST'])
def create_audit():
    """Create a new audit."""
    return audit_crud.create()


@bp.route('/sync', methods=['POST'])
def sync_audits():
    """Bulk-insert audits that are not stored yet."""
    return audit_crud.sync()


@bp.errorhandler(404)
def audit_not_found(e):
    return api_error('Audit not found', 404)


@bp.errorhandler(413)
def payload_too_large(e):
    return api_error('Request body is too large', 413)
