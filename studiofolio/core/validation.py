"""
Validation Helpers
==================

Required-field checks and payload normalisation shared by all entity
mutators. Nothing beyond presence checks is validated locally; the backend
enforces the rest.
"""

REQUIRED_FIELDS_MESSAGE = 'Please fill in required fields'


class ValidationError(ValueError):
    """One or more required fields are empty."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"{REQUIRED_FIELDS_MESSAGE}: {', '.join(self.missing)}")


def require_fields(data, fields):
    """Raise ValidationError naming every field in *fields* that is blank."""
    missing = []
    for field in fields:
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            missing.append(field)
    if missing:
        raise ValidationError(missing)


def empty_to_none(data, fields):
    """Return a copy of *data* with empty-string values in *fields* replaced by None."""
    cleaned = dict(data)
    for field in fields:
        if field in cleaned and isinstance(cleaned[field], str) and not cleaned[field].strip():
            cleaned[field] = None
    return cleaned


def to_int_or_none(value):
    """Coerce form input to int; blank, zero and unparsable values become None."""
    if value in (None, ''):
        return None
    try:
        number = int(value)
    except (ValueError, TypeError):
        return None
    return number or None


def to_bool(value):
    """Interpret checkbox/JSON input as a boolean."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)
