from datetime import datetime
from zoneinfo import ZoneInfo
from sqlalchemy import Column, Integer, Float, Boolean, Text, DateTime, Index, JSON, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Audits are collected in Lagos State; all server timestamps use local time
APP_TIMEZONE = ZoneInfo('Africa/Lagos')


def now():
    """Return current datetime in application timezone (timezone-aware).

    Note: When stored in SQLite, timezone info is stripped (SQLite limitation).
    """
    return datetime.now(APP_TIMEZONE)


class Audit(Base):
    __tablename__ = 'audits'
    # Identifier is assigned by the field client, never generated here
    id = Column(Integer, primary_key=True, autoincrement=False, nullable=False)
    school_name = Column(Text, nullable=False, default="", server_default="")
    local_gov = Column(Text, nullable=False, default="", server_default="")
    school_address = Column(Text, nullable=False, default="", server_default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    principal_name = Column(Text, nullable=False, default="", server_default="")
    total_teachers = Column(Integer, nullable=False, default=0, server_default="0")
    total_students = Column(Integer, nullable=False, default=0, server_default="0")
    facility_condition = Column(Text, nullable=False, default="", server_default="")
    additional_notes = Column(Text, nullable=False, default="", server_default="")
    photos = Column(JSON, nullable=False, default=list)
    auditor = Column(Text, nullable=False, default="", server_default="")
    timestamp = Column(Text, nullable=False, default="", server_default="")
    synced = Column(Boolean, nullable=False, default=False, server_default=text("0"))
    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)

Index('idx_audit_local_gov', Audit.local_gov)
