"""
Form Drafts
===========

Pending create-form values kept in the signed Flask session, one draft per
entity. Drafts change only through commands run by a reducer, so every
transition can be exercised on its own.
"""

import copy
from flask import current_app, session
from .validation import to_bool

# Room left in the cookie for flash messages
DRAFT_COOKIE_HEADROOM = 512

DRAFT_TOO_LARGE_MESSAGE = 'Draft too large to keep: shorten the text or remove some images'


class DraftTooLarge(Exception):
    """The draft would push the session cookie past the browser's size limit."""

    def __init__(self, key, size, limit):
        self.key = key
        self.size = size
        self.limit = limit
        super().__init__(f"Draft {key!r} needs a {size}-byte session cookie (limit {limit})")


class SetField:
    """Set one draft field to *value*."""

    def __init__(self, name, value):
        self.name = name
        self.value = value

    def __repr__(self):
        return f"SetField({self.name!r}, {self.value!r})"


class Reset:
    """Return the draft to its defaults."""

    def __repr__(self):
        return "Reset()"


def reduce_fields(draft, command, defaults):
    """Reducer for flat drafts (services, reviews, categories).

    Never mutates *draft*; returns the next draft.
    """
    if isinstance(command, Reset):
        return copy.deepcopy(defaults)
    if isinstance(command, SetField):
        if command.name not in defaults:
            raise KeyError(f"Unknown draft field: {command.name}")
        updated = copy.deepcopy(draft)
        updated[command.name] = command.value
        return updated
    raise TypeError(f"Unsupported draft command: {command!r}")


def load_draft(key, defaults):
    """Current draft stored under *key*, merged over *defaults*."""
    draft = copy.deepcopy(defaults)
    stored = session.get(key)
    if isinstance(stored, dict):
        draft.update({k: v for k, v in stored.items() if k in defaults})
    return draft


def _session_cookie_size():
    """Length of the signed session cookie as it would be sent now (0 for server-side sessions)."""
    get_serializer = getattr(current_app.session_interface, 'get_signing_serializer', None)
    if get_serializer is None:
        return 0
    serializer = get_serializer(current_app)
    if serializer is None:
        return 0
    name = current_app.config.get('SESSION_COOKIE_NAME') or 'session'
    return len(name) + 1 + len(serializer.dumps(dict(session)))


def save_draft(key, draft):
    """Store *draft* under *key*.

    Raises DraftTooLarge, leaving the previously stored draft in place, when
    the session cookie would grow past MAX_COOKIE_SIZE less DRAFT_COOKIE_HEADROOM.
    """
    previous = session.get(key)
    session[key] = draft

    limit = current_app.config.get('MAX_COOKIE_SIZE', 4093) - DRAFT_COOKIE_HEADROOM
    size = _session_cookie_size()
    if size > limit:
        if previous is None:
            session.pop(key, None)
        else:
            session[key] = previous
        raise DraftTooLarge(key, size, limit)


def clear_draft(key):
    session.pop(key, None)


def apply_field_commands(draft, commands, defaults):
    for command in commands:
        draft = reduce_fields(draft, command, defaults)
    return draft


def commands_from_fields(form, defaults):
    """SetField commands for every submitted field; booleans come from checkboxes."""
    commands = []
    for name, default in defaults.items():
        if isinstance(default, bool):
            commands.append(SetField(name, to_bool(form.get(name))))
        elif name in form:
            value = form.get(name)
            commands.append(SetField(name, value.strip() if isinstance(value, str) else value))
    return commands
