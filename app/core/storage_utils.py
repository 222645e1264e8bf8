# app/core/storage_utils.py
import uuid

from app.core.supabase_client import supabase_admin

BUCKET = "products"


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return the public URL.

    Existing objects at `path` are overwritten (upsert).

    Args:
        path: Object path inside the bucket, e.g. "<product_id>/<uuid>.png"
        file_bytes: File content.
        content_type: MIME type stored with the object.
    """
    bucket = supabase_admin().storage.from_(BUCKET)
    bucket.upload(
        path,
        file_bytes,
        {"upsert": "true", "content-type": content_type},
    )
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.
    """
    supabase_admin().storage.from_(BUCKET).remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/products/p/a.png
        -> 'p/a.png'
    """
    marker = f"/storage/v1/object/public/{BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def delete_public_url(url: str) -> None:
    """
    Delete a file by its public URL.
    No-op if the URL does not belong to this bucket (e.g. seeded /images/...).
    """
    path = extract_path_from_public_url(url)
    if path:
        delete_from_storage(path)


def generate_filename(ext: str) -> str:
    return f"{uuid.uuid4()}.{ext}"
