#!/usr/bin/env python3
"""
Startup script for the school audit backend
"""
import os
from audit_backend.app import create_app
from audit_backend.models import db

if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(debug=True, host='0.0.0.0', port=int(os.getenv('PORT', 3000)))
