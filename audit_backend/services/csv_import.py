"""Import school records from the state school list CSV.

The CSV is a spreadsheet export with a few title rows before the real header
(``S/N, Local government, ..., School name, Address, ...``). Each data row is
upserted into the audits table keyed by its serial number, so an import can be
repeated after audits have been collected without losing field data.
"""
import csv
import logging
from ..models import db, Audit
from audit_shared.schemas import sanitize_html
from audit_shared.validation import Validator, ValidationError

logger = logging.getLogger(__name__)

HEADER_MARKER = 's/n'

# Column positions in the school list export
ID_COLUMN = 0
LOCAL_GOV_COLUMN = 1
SCHOOL_NAME_COLUMN = 3
SCHOOL_ADDRESS_COLUMN = 4


class CsvImportError(Exception):
    """Raised when the CSV file does not have the expected layout."""
    pass


def read_csv_rows(csv_path):
    """Read all non-blank rows from a CSV file."""
    with open(csv_path, newline='', encoding='utf-8-sig') as f:
        return [row for row in csv.reader(f) if any(cell.strip() for cell in row)]


def find_header_index(rows):
    """Return the index of the header row, or -1 when there is none."""
    for index, row in enumerate(rows):
        if row and HEADER_MARKER in row[0].lower():
            return index
    return -1


def _cell(row, position):
    if len(row) <= position:
        return ''
    return sanitize_html(row[position]).strip()


def parse_school_row(row):
    """Extract audit fields from a data row.

    Returns:
        dict or None: Field values, or None for rows without a numeric serial number
    """
    if not row:
        return None
    try:
        audit_id = Validator.validate_audit_id(row[ID_COLUMN])
    except ValidationError:
        return None

    return {
        'id': audit_id,
        'local_gov': _cell(row, LOCAL_GOV_COLUMN),
        'school_name': _cell(row, SCHOOL_NAME_COLUMN),
        'school_address': _cell(row, SCHOOL_ADDRESS_COLUMN),
    }


def import_audits_from_csv(csv_path):
    """Upsert audits from a school list CSV.

    Existing audits keep their collected data; only the school identity
    fields are overwritten. Must be called inside an application context.

    Args:
        csv_path (str): Path to the CSV file

    Returns:
        dict: Counts of created, updated and skipped rows

    Raises:
        CsvImportError: If no header row is found
    """
    rows = read_csv_rows(csv_path)
    header_index = find_header_index(rows)
    if header_index == -1:
        raise CsvImportError('Could not find header row in CSV')

    summary = {
        'created': 0,
        'updated': 0,
        'skipped': 0
    }
    seen = {}

    try:
        for row in rows[header_index + 1:]:
            fields = parse_school_row(row)
            if fields is None:
                summary['skipped'] += 1
                continue

            audit = seen.get(fields['id']) or db.session.get(Audit, fields['id'])
            if audit is None:
                audit = Audit(photos=[], **fields)
                db.session.add(audit)
                summary['created'] += 1
            else:
                for key, value in fields.items():
                    setattr(audit, key, value)
                summary['updated'] += 1
            audit.synced = True
            seen[fields['id']] = audit

        db.session.commit()
    except Exception as e:
        logger.error(f"CSV import from {csv_path} failed: {e}", exc_info=True)
        db.session.rollback()
        raise

    logger.info(f"Imported audits from {csv_path}: {summary}")
    return summary
