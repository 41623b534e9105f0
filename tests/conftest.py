"""
Shared fixtures for the studiofolio test suite.

The Supabase client is replaced by FakeSupabase, an in-memory stand-in that
implements the slice of the query builder, auth and storage API the app uses.
Tests install it through Studiofolio(app, {'backend': fake}).
"""

import itertools
import re
from types import SimpleNamespace

import pytest
from flask import Flask

from studiofolio import Studiofolio

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------

class FakeBackendError(Exception):
    """Raised by the fake for injected failures."""


class FakeAuthError(Exception):
    """Mirrors the .message attribute of the auth library's API errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


_EMBED = re.compile(r'(\w+)\(([^)]*)\)')


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table_name = table
        self.action = 'select'
        self.columns = '*'
        self.payload = None
        self.filters = []
        self.ordering = None
        self.max_rows = None

    # builder -----------------------------------------------------------

    def select(self, columns='*'):
        self.action, self.columns = 'select', columns
        return self

    def insert(self, rows):
        self.action, self.payload = 'insert', rows
        return self

    def update(self, changes):
        self.action, self.payload = 'update', changes
        return self

    def delete(self):
        self.action = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    # execution ---------------------------------------------------------

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def _project(self, row):
        """Apply the column selection, resolving embedded relations."""
        embeds = _EMBED.findall(self.columns)
        plain = [c.strip() for c in _EMBED.sub('', self.columns).split(',') if c.strip()]
        result = dict(row) if '*' in plain else {c: row.get(c) for c in plain}
        for relation, fields in embeds:
            wanted = [f.strip() for f in fields.split(',') if f.strip()]
            related = self.backend.find(relation, row.get('category_id'))
            result[relation] = {f: related.get(f) for f in wanted} if related else None
        return result

    def execute(self):
        self.backend.calls.append((self.action, self.table_name))
        if (self.action, self.table_name) in self.backend.failures:
            raise FakeBackendError(f"{self.action} on {self.table_name} failed")

        table = self.backend.tables.setdefault(self.table_name, [])

        if self.action == 'insert':
            stored = []
            for row in self.payload:
                row = dict(row)
                row.setdefault('id', next(self.backend.ids))
                row.setdefault('created_at', f"2024-01-01T00:00:{next(self.backend.clock):02d}")
                table.append(row)
                stored.append(dict(row))
            return SimpleNamespace(data=stored)

        matched = [row for row in table if self._matches(row)]

        if self.action == 'update':
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.action == 'delete':
            self.backend.tables[self.table_name] = [row for row in table if row not in matched]
            return SimpleNamespace(data=matched)

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda r: (r.get(column) is None, r.get(column) or ''),
                             reverse=desc)
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return SimpleNamespace(data=[self._project(row) for row in matched])


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.sign_outs = 0
        self.sign_ups = []
        self._ids = itertools.count(100)

    def add_user(self, email, password, confirmed=True):
        user_id = f"user-{next(self._ids)}"
        self.users[email] = {'id': user_id, 'password': password, 'confirmed': confirmed}
        return user_id

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials['email'])
        if not user or user['password'] != credentials['password']:
            raise FakeAuthError('Invalid login credentials')
        if not user['confirmed']:
            raise FakeAuthError('Email not confirmed')
        return SimpleNamespace(
            user=SimpleNamespace(id=user['id'], email=credentials['email']),
            session=SimpleNamespace(access_token=f"token-{user['id']}"),
        )

    def sign_up(self, credentials):
        self.sign_ups.append(credentials)
        if credentials['email'] in self.users:
            raise FakeAuthError('User already registered')
        user_id = self.add_user(credentials['email'], credentials['password'], confirmed=False)
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=credentials['email']), session=None)

    def sign_out(self):
        self.sign_outs += 1


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, data, options=None):
        if self.storage.fail_after is not None and len(self.storage.objects) >= self.storage.fail_after:
            raise FakeBackendError(f"upload of {path} failed")
        self.storage.objects[path] = {'bucket': self.name, 'data': data, 'options': options or {}}
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail_after = None

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory Supabase client."""

    def __init__(self):
        self.tables = {
            'projects': [],
            'project_categories': [],
            'services': [],
            'reviews': [],
            'profiles': [],
        }
        self.failures = set()
        self.calls = []
        self.ids = itertools.count(1)
        self.clock = itertools.count(1)
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)

    def find(self, table, row_id):
        for row in self.tables.get(table, []):
            if str(row.get('id')) == str(row_id):
                return row
        return None

    def seed(self, table, **row):
        """Insert a row directly, bypassing the app."""
        return self.table(table).insert([row]).execute().data[0]

    def fail(self, action, table):
        self.failures.add((action, table))

    def backend_calls(self, action=None, table=None):
        return [c for c in self.calls
                if (action is None or c[0] == action) and (table is None or c[1] == table)]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def backend():
    fake = FakeSupabase()
    fake.auth.add_user(ADMIN_EMAIL, ADMIN_PASSWORD)
    return fake


@pytest.fixture
def app(backend):
    """Fully initialised Flask app with all studiofolio modules registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    Studiofolio(app, {
        'backend': backend,
        'admin_email': ADMIN_EMAIL,
        'brand_name': 'Test Studio',
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client with an admin session already stored."""
    with client.session_transaction() as sess:
        sess['admin_id'] = 'user-admin'
        sess['admin_email'] = ADMIN_EMAIL
        sess['admin_role'] = 'admin'
    return client


@pytest.fixture
def categories(backend):
    """The four categories the site ships with."""
    return {
        slug: backend.seed('project_categories', name=name, slug=slug)
        for slug, name in (
            ('website-development', 'Website Development'),
            ('graphic-design', 'Graphic Design'),
            ('video-editing', 'Video Editing'),
            ('instagram-reels', 'Instagram Reels'),
        )
    }


@pytest.fixture
def flashes(client):
    """Callable returning the flash messages waiting in the session as (category, message)."""
    def read():
        with client.session_transaction() as sess:
            return [tuple(f) for f in sess.get("_flashes", [])]
    return read
