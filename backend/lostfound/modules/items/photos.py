"""Storage for uploaded item photos.

Each photo is stored under a random name with a 480px thumbnail, either on
local disk (``UPLOAD_FOLDER``) or in S3 when ``S3_BUCKET_NAME`` is configured.
Only URLs are persisted on the item.
"""
from __future__ import annotations

import os
import secrets
from io import BytesIO

import boto3
from botocore.client import Config as BotoConfig
from flask import current_app, url_for
from PIL import Image
from werkzeug.datastructures import FileStorage

from ...errors import ValidationError

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
THUMB_SIZE = (480, 480)


def _thumbnail(file_bytes: bytes, ext: str) -> bytes | None:
    try:
        img = Image.open(BytesIO(file_bytes))
        img.thumbnail(THUMB_SIZE)
        thumb_io = BytesIO()
        thumb_format = "PNG" if ext in (".png", ".webp", ".gif") else "JPEG"
        if thumb_format == "JPEG" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(thumb_io, format=thumb_format, optimize=True)
        return thumb_io.getvalue()
    except Exception:
        current_app.logger.warning("Could not build thumbnail", exc_info=True)
        return None


def _validate(upload: FileStorage, file_bytes: bytes) -> str:
    ext = os.path.splitext(upload.filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"photos: {upload.filename} is not an allowed image type.")
    if len(file_bytes) > int(current_app.config["MAX_PHOTO_BYTES"]):
        raise ValidationError(f"photos: {upload.filename} exceeds the per-file size limit.")
    return ext


def _store_s3(fname: str, file_bytes: bytes, thumb_bytes: bytes | None, mimetype: str | None) -> str:
    cfg = current_app.config
    bucket = cfg["S3_BUCKET_NAME"]
    s3 = boto3.client(
        "s3",
        region_name=cfg.get("S3_REGION") or None,
        aws_access_key_id=cfg.get("S3_ACCESS_KEY_ID") or None,
        aws_secret_access_key=cfg.get("S3_SECRET_ACCESS_KEY") or None,
        endpoint_url=cfg.get("S3_ENDPOINT_URL") or None,
        config=BotoConfig(s3={"addressing_style": "virtual"}),
    )
    key = f"uploads/{fname}"
    s3.put_object(Bucket=bucket, Key=key, Body=file_bytes, ContentType=mimetype or "application/octet-stream", ACL="public-read")
    if thumb_bytes is not None:
        s3.put_object(Bucket=bucket, Key=f"uploads/thumbs/{fname}", Body=thumb_bytes, ContentType="image/jpeg", ACL="public-read")
    base = cfg.get("S3_PUBLIC_URL_BASE")
    if base:
        return f"{base.rstrip('/')}/{key}"
    region = cfg.get("S3_REGION") or "us-east-1"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def _store_local(fname: str, file_bytes: bytes, thumb_bytes: bytes | None) -> str:
    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(os.path.join(upload_folder, "thumbs"), exist_ok=True)
    with open(os.path.join(upload_folder, fname), "wb") as f:
        f.write(file_bytes)
    if thumb_bytes is not None:
        with open(os.path.join(upload_folder, "thumbs", fname), "wb") as f:
            f.write(thumb_bytes)
    # Relative URLs; the reverse proxy serves /uploads
    return url_for("uploads", filename=fname, _external=False)


def save_photos(uploads: list[FileStorage]) -> list[str]:
    """Validate and store uploads, returning their URLs in upload order."""
    checked: list[tuple[FileStorage, bytes, str]] = []
    for upload in uploads:
        file_bytes = upload.read()
        checked.append((upload, file_bytes, _validate(upload, file_bytes)))

    urls: list[str] = []
    for upload, file_bytes, ext in checked:
        fname = secrets.token_hex(16) + ext
        thumb_bytes = _thumbnail(file_bytes, ext)
        if current_app.config.get("S3_BUCKET_NAME"):
            urls.append(_store_s3(fname, file_bytes, thumb_bytes, upload.mimetype))
        else:
            urls.append(_store_local(fname, file_bytes, thumb_bytes))
    return urls


def thumb_url(photo_url: str) -> str | None:
    """Thumbnail URL for ``photo_url``, or None when no thumbnail is known.

    Local thumbnails are only advertised when the file was actually written.
    """
    if "/uploads/" not in photo_url:
        return None
    url = photo_url.replace("/uploads/", "/uploads/thumbs/", 1)
    if url.startswith("/uploads/"):
        rel = url[len("/uploads/"):]
        if not os.path.isfile(os.path.join(current_app.config["UPLOAD_FOLDER"], rel)):
            return None
    return url
