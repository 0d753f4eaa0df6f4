"""Input validation and coercion utilities."""
import math


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


class ConflictError(ValidationError):
    """Raised when a record with the same identifier already exists."""
    pass


# SQLite INTEGER bounds
MAX_INTEGER = 2 ** 63 - 1
MIN_INTEGER = -2 ** 63

INVALID_ID_MESSAGE = 'Missing or invalid id (must be a unique number)'


class Validator:
    """Coercion helpers for loosely typed audit payloads.

    Field clients and spreadsheet exports send numbers as strings, empty
    strings for missing values and so on. These helpers turn such values into
    the types the audit table stores.
    """

    @staticmethod
    def to_number(value):
        """Convert an int, float or numeric string to a finite float.

        Returns None for anything else, including booleans, blank strings,
        NaN and infinity.
        """
        if isinstance(value, bool):
            return None

        if isinstance(value, (int, float)):
            try:
                number = float(value)
            except OverflowError:
                return None
        elif isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            try:
                number = float(stripped)
            except ValueError:
                return None
        else:
            return None

        if math.isnan(number) or math.isinf(number):
            return None
        return number

    @staticmethod
    def validate_audit_id(value):
        """Validate an audit identifier and return it as an int.

        The identifier is assigned by the client, so it must be present, non-zero
        and a whole number (``12`` and ``"12"`` are both accepted).
        """
        if isinstance(value, int) and not isinstance(value, bool):
            audit_id = value
        else:
            number = Validator.to_number(value)
            if number is None or not number.is_integer():
                raise ValidationError(INVALID_ID_MESSAGE)
            audit_id = int(number)

        if audit_id == 0 or not MIN_INTEGER <= audit_id <= MAX_INTEGER:
            raise ValidationError(INVALID_ID_MESSAGE)
        return audit_id

    @staticmethod
    def coerce_count(value):
        """Coerce a head count to an int.

        Non-numeric values and counts the INTEGER column cannot hold become 0.
        """
        if isinstance(value, int) and not isinstance(value, bool):
            count = int(value)
        else:
            number = Validator.to_number(value)
            if number is None:
                return 0
            count = int(number)
        if not MIN_INTEGER <= count <= MAX_INTEGER:
            return 0
        return count

    @staticmethod
    def coerce_coordinate(value, field_name):
        """Coerce a latitude or longitude to a float.

        Absent values and empty strings become None. Anything else that is
        not numeric is rejected.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        number = Validator.to_number(value)
        if number is None:
            raise ValidationError(f"{field_name} must be a valid number")
        return number
