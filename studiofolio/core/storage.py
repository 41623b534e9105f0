"""
Storage Utility
===============

Image upload to the Supabase storage bucket.
"""

import uuid
from .backend import get_bucket
from .logging_service import logger

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}

THUMBNAIL_PREFIX = 'thumb-'


class UploadError(Exception):
    """A file failed to upload; files before it were already stored."""

    def __init__(self, filename, uploaded_count, cause=None):
        self.filename = filename
        self.uploaded_count = uploaded_count
        self.cause = cause
        super().__init__(f"Upload failed for {filename!r} after {uploaded_count} file(s): {cause}")


def file_extension(filename):
    return filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else ''


def allowed_file(filename):
    return file_extension(filename) in ALLOWED_EXTENSIONS


def random_filename(original_filename, prefix=''):
    """Randomized object name keeping the original extension, e.g. "thumb-3f2a....png"."""
    ext = file_extension(original_filename)
    name = f"{prefix}{uuid.uuid4().hex}"
    return f"{name}.{ext}" if ext else name


def upload_file(file, prefix=''):
    """Upload one werkzeug FileStorage to the bucket.

    Args:
        file: Uploaded file (anything with .filename and .read()).
        prefix: Object name prefix (THUMBNAIL_PREFIX for thumbnails).

    Returns:
        Public URL of the stored object.
    """
    if not allowed_file(file.filename):
        raise ValueError(f"Invalid file type: {file.filename}")

    object_name = random_filename(file.filename, prefix)
    content_type = CONTENT_TYPES.get(file_extension(file.filename), 'application/octet-stream')

    bucket = get_bucket()
    bucket.upload(object_name, file.read(), {'content-type': content_type})
    public_url = bucket.get_public_url(object_name)

    logger.info('storage', f"Uploaded {file.filename} as {object_name}")
    return public_url


def upload_files(files, prefix=''):
    """Upload *files* one at a time, yielding each public URL as it is stored.

    The first failure raises UploadError; later files are never attempted.
    URLs already yielded stay with the caller.
    """
    uploaded = 0
    for file in files:
        try:
            url = upload_file(file, prefix)
        except Exception as e:
            raise UploadError(file.filename, uploaded, e) from e
        uploaded += 1
        yield url
