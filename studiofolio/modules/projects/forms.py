"""
Project Form Schema
===================

Which fields the project form shows depends on the selected category. Each
category type is a FormVariant declaring its own fields; variants are picked
from CATEGORY_VARIANTS by category slug, with SOCIAL_VARIANT as the fallback.

The create form's pending values live in a draft dict that only changes
through reduce_draft().
"""

import copy
from functools import reduce

from studiofolio.core.drafts import SetField, Reset
from studiofolio.core.validation import ValidationError, to_bool

DRAFT_SESSION_KEY = 'project_draft'

DEFAULT_PROJECT_DRAFT = {
    'title': '',
    'description': '',
    'image_url': '',
    'thumbnail_url': '',
    'images': [],
    'demo_url': '',
    'code_url': '',
    'instagram_url': '',
    'youtube_views': 0,
    'brand_name': '',
    'client_name': '',
    'project_date': '',
    'social_date': '',
    'social_links': {},
    'category_id': '',
    'category_slug': '',
    'show_on_home': False,
    'is_featured': False,
}


# ===== Schema =====

class FieldSpec:
    """One form field. target='social_links' stores the value under social_links[name]."""

    def __init__(self, name, label, kind='text', target='column'):
        self.name = name
        self.label = label
        self.kind = kind
        self.target = target

    @property
    def is_social_link(self):
        return self.target == 'social_links'

    def read(self, draft):
        if self.is_social_link:
            return (draft.get('social_links') or {}).get(self.name, '')
        return draft.get(self.name, '')

    def command(self, value):
        if self.is_social_link:
            return SetSocialLink(self.name, value)
        return SetField(self.name, value)

    def __repr__(self):
        return f"FieldSpec({self.name!r}, target={self.target!r})"


COMMON_FIELDS = (
    FieldSpec('title', 'Project Title'),
    FieldSpec('description', 'Description', 'textarea'),
    FieldSpec('project_date', 'Project Date', 'date'),
    FieldSpec('image_url', 'Image URL', 'url'),
    FieldSpec('thumbnail_url', 'Thumbnail URL', 'url'),
    FieldSpec('show_on_home', 'Show on Home', 'checkbox'),
    FieldSpec('is_featured', 'Featured', 'checkbox'),
)

CLIENT_NAME = FieldSpec('client_name', 'Client Name')


class FormVariant:
    """Field set and validation for one category type."""

    required = ('title', 'category_id')

    def __init__(self, key, label, fields):
        self.key = key
        self.label = label
        self.fields = tuple(fields)

    @property
    def all_fields(self):
        return COMMON_FIELDS + self.fields

    def has_field(self, field):
        return any(f.name == field.name and f.target == field.target for f in self.fields)

    def missing(self, draft):
        return [name for name in self.required if not str(draft.get(name) or '').strip()]

    def __repr__(self):
        return f"FormVariant({self.key!r})"


CATEGORY_VARIANTS = {
    'graphic-design': FormVariant('graphic-design', 'Graphic Design', (
        CLIENT_NAME,
        FieldSpec('brand_name', 'Brand Name'),
    )),
    'website-development': FormVariant('website-development', 'Website Development', (
        FieldSpec('demo_url', 'Demo URL', 'url'),
        FieldSpec('code_url', 'Code URL', 'url'),
        FieldSpec('project_url', 'Project URL', 'url', target='social_links'),
        CLIENT_NAME,
    )),
    'video-editing': FormVariant('video-editing', 'Video Editing', (
        CLIENT_NAME,
        FieldSpec('duration', 'Duration', target='social_links'),
    )),
}

SOCIAL_VARIANT = FormVariant('social', 'Social', (
    FieldSpec('instagram_url', 'Instagram URL', 'url'),
    FieldSpec('youtube_views', 'YouTube Views', 'number'),
    FieldSpec('social_date', 'Posted On', 'date'),
))


def variant_for_slug(slug):
    """Variant for a category slug; None when no category is selected."""
    if not slug:
        return None
    return CATEGORY_VARIANTS.get(slug, SOCIAL_VARIANT)


def validate_project(data):
    """Raise ValidationError for the required fields of the project's variant.

    JSON bodies carry no category_slug; they are checked against the fallback
    variant, whose required fields are the same.
    """
    variant = variant_for_slug(data.get('category_slug')) or SOCIAL_VARIANT
    missing = variant.missing(data)
    if missing:
        raise ValidationError(missing)


def _all_variant_fields():
    seen = []
    for variant in list(CATEGORY_VARIANTS.values()) + [SOCIAL_VARIANT]:
        for field in variant.fields:
            if not any(f.name == field.name and f.target == field.target for f in seen):
                seen.append(field)
    return seen


def hidden_values(draft, variant):
    """Category-specific fields holding a value that the current variant does not show.

    These values stay in the draft and are submitted with it.
    """
    hidden = []
    for field in _all_variant_fields():
        if variant is not None and variant.has_field(field):
            continue
        value = field.read(draft)
        if value not in (None, '', 0, [], {}):
            hidden.append(field)
    return hidden


# ===== Commands =====

class SetTitle:
    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"SetTitle({self.value!r})"


class SetCategory:
    def __init__(self, category_id, slug=None):
        self.category_id = category_id
        self.slug = slug

    def __repr__(self):
        return f"SetCategory({self.category_id!r}, {self.slug!r})"


class SetSocialLink:
    """Set (or, with an empty value, drop) one key of the free-form social_links object."""

    def __init__(self, key, value):
        self.key = key
        self.value = value

    def __repr__(self):
        return f"SetSocialLink({self.key!r}, {self.value!r})"


class AddImage:
    def __init__(self, url):
        self.url = url

    def __repr__(self):
        return f"AddImage({self.url!r})"


class RemoveImage:
    def __init__(self, url):
        self.url = url

    def __repr__(self):
        return f"RemoveImage({self.url!r})"


def default_project_draft():
    return copy.deepcopy(DEFAULT_PROJECT_DRAFT)


def reduce_draft(draft, command):
    """Apply one command to a project draft, returning a new draft."""
    if isinstance(command, Reset):
        return default_project_draft()

    updated = copy.deepcopy(draft)

    if isinstance(command, SetTitle):
        updated['title'] = command.value
    elif isinstance(command, SetCategory):
        updated['category_id'] = command.category_id or ''
        updated['category_slug'] = command.slug or ''
    elif isinstance(command, SetField):
        if command.name not in DEFAULT_PROJECT_DRAFT:
            raise KeyError(f"Unknown project field: {command.name}")
        updated[command.name] = command.value
    elif isinstance(command, SetSocialLink):
        links = dict(updated.get('social_links') or {})
        if command.value in (None, ''):
            links.pop(command.key, None)
        else:
            links[command.key] = command.value
        updated['social_links'] = links
    elif isinstance(command, AddImage):
        images = list(updated.get('images') or [])
        if command.url and command.url not in images:
            images.append(command.url)
        updated['images'] = images
    elif isinstance(command, RemoveImage):
        updated['images'] = [url for url in (updated.get('images') or []) if url != command.url]
    else:
        raise TypeError(f"Unsupported draft command: {command!r}")

    return updated


def apply_commands(draft, commands):
    return reduce(reduce_draft, commands, draft)


def commands_from_form(form, variant, category_slug=None):
    """Translate a submitted project form into draft commands.

    Only fields rendered for *variant* produce commands, so values of fields
    the variant hides are left as they are.
    """
    commands = []
    if 'category_id' in form:
        commands.append(SetCategory(form.get('category_id', ''), category_slug))
    if variant is None:
        return commands

    for field in variant.all_fields:
        if field.kind == 'checkbox':
            commands.append(field.command(to_bool(form.get(field.name))))
        elif field.name in form:
            value = form.get(field.name, '').strip()
            if field.name == 'title':
                commands.append(SetTitle(value))
            else:
                commands.append(field.command(value))
    return commands


def draft_from_project(project):
    """Seed an edit draft from a fetched project row."""
    draft = default_project_draft()
    for key in DEFAULT_PROJECT_DRAFT:
        if key in project and project[key] is not None:
            draft[key] = project[key]
    category = project.get('project_categories') or {}
    draft['category_slug'] = category.get('slug', '')
    return draft
