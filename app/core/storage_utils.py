# app/core/storage_utils.py
import re
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it will be overwritten
    thanks to the 'upsert' option.

    Args:
        path: Object path inside the bucket.
              Example: "sandwiches/club-3f2a....png"
        file_bytes: File content in bytes.
        content_type: MIME type stored alongside the object.

    Returns:
        Public URL to the uploaded file.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    bucket = supabase_admin().storage.from_(get_settings().STORAGE_BUCKET)
    bucket.upload(path, file_bytes, {"upsert": "true", "content-type": content_type})
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.
    """
    supabase_admin().storage.from_(get_settings().STORAGE_BUCKET).remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/sandwich-images/sandwiches/club.png
        -> 'sandwiches/club.png'
    """
    marker = f"/storage/v1/object/public/{get_settings().STORAGE_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def delete_public_url(url: str) -> None:
    """
    Convenience helper: delete a file by its public URL.
    No-op if the URL does not belong to this bucket (e.g. the placeholder).
    """
    path = extract_path_from_public_url(url)
    if path:
        delete_from_storage(path)


def generate_filename(name: str, ext: str) -> str:
    """
    Build a storage filename from a display name.

    Args:
        name: Sandwich / ingredient name, e.g. "Poulet rôti"
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "poulet-r-ti-<uuid4 hex>.png"
    """
    stem = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-") or "image"
    return f"{stem}-{uuid.uuid4().hex}.{ext}"
