from flask_sqlalchemy import SQLAlchemy
from audit_shared.models import Base, Audit

db = SQLAlchemy(model_class=Base)

__all__ = ['db', 'Audit']
