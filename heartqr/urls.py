"""URL input handling: validation, normalisation and export file names."""

import re
from urllib.parse import urlsplit

from heartqr import MAX_URL_LENGTH
from heartqr.errors import InputError

EXPORT_PREFIX = "heart-qr_"
MAX_SLUG_LENGTH = 40


def normalize_url(raw: str | None) -> str:
    """Trim and add ``https://`` when no scheme is present."""
    v = (raw or "").strip()
    if not v:
        return v
    return v if "://" in v else f"https://{v}"


def validate_url(raw: str | None) -> str:
    """Validate user input and return the normalised URL.

    Raises:
        InputError: empty, longer than MAX_URL_LENGTH, or not a URL.
    """
    v = (raw or "").strip()
    if not v:
        raise InputError("Please enter a URL.")
    if len(v) > MAX_URL_LENGTH:
        raise InputError(f"URL must be at most {MAX_URL_LENGTH} characters.")

    url = normalize_url(v)
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InputError(f"Invalid URL '{v}' (e.g. https://example.com)") from e
    if not parts.scheme or not parts.netloc or any(ch.isspace() for ch in url):
        raise InputError(f"Invalid URL '{v}' (e.g. https://example.com)")
    return url


def export_name(url: str, suffix: str = ".png") -> str:
    """File name for a rendered code: scheme dropped, unsafe runs collapsed to '-'."""
    slug = re.sub(r"^https?://", "", normalize_url(url), flags=re.IGNORECASE)
    slug = re.sub(r"[^a-zA-Z0-9._-]+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    slug = slug[:MAX_SLUG_LENGTH] or "qr"
    return f"{EXPORT_PREFIX}{slug}{suffix}"
