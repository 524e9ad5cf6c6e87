# COMPONENT: KEY DERIVATION
# REQUIREMENTS SATISFIED: deterministic storage keys, lossless URL-to-key inversion

"""
src/services/keys.py

Pure helpers that map uploads onto object store keys and back.

Every uploaded asset lives under a key of the form

    {folder}/{epoch_millis}-{random_suffix}-{file_name}

The random suffix is left out on the single-file upload path and added on the
presign and batch paths, where several files can land in the same
millisecond. Public URLs are always `{public_base_url}/{key}`, so a URL stored
on a record can be turned back into the key that produced it.

Inversion fails closed: a URL that does not live under the public base URL
never yields a key, since guessing one could delete an unrelated object.
"""
from __future__ import annotations

import os
import time
import uuid
from typing import Optional

from src.errors import ValidationError


def now_millis() -> int:
    return int(time.time() * 1000)


def random_suffix() -> str:
    """Nine lowercase hex characters, unique enough within one millisecond."""
    return uuid.uuid4().hex[:9]


def clean_file_name(file_name: Optional[str]) -> str:
    """
    Strip directory components from a client-supplied file name.

    Browsers sometimes send full paths (C:\\fakepath\\x.jpg) and a crafted
    name could otherwise add extra key segments.
    """
    name = (file_name or "").replace("\\", "/").split("/")[-1].strip()
    if name in ("", ".", ".."):
        raise ValidationError("A file name is required.")
    return name


def derive_key(
    folder: str,
    file_name: str,
    now_ms: int,
    suffix: Optional[str] = None,
) -> str:
    if suffix:
        return f"{folder}/{now_ms}-{suffix}-{file_name}"
    return f"{folder}/{now_ms}-{file_name}"


def public_url_for(key: str, public_base_url: str) -> str:
    return f"{public_base_url.rstrip('/')}/{key}"


def derive_key_from_url(url: Optional[str], public_base_url: Optional[str]) -> Optional[str]:
    """
    Return the key a public URL was built from, or None.

    None is returned when either value is empty, when the URL is not under
    the base (a lookalike host such as `cdn.example.com.evil` does not
    count), or when nothing is left after the prefix.
    """
    if not url or not public_base_url:
        return None

    base = public_base_url.rstrip("/")
    if not base or not url.startswith(base + "/"):
        return None

    key = url[len(base):].lstrip("/")
    return key or None


def folder_of(key: str) -> str:
    return key.split("/", 1)[0] if "/" in key else ""


def display_name(key: str) -> str:
    """File name a key was derived from, without folder, timestamp or suffix."""
    base = os.path.basename(key)
    parts = base.split("-", 1)
    if len(parts) == 2 and parts[0].isdigit():
        base = parts[1]
        head, sep, rest = base.partition("-")
        if sep and len(head) == 9 and all(c in "0123456789abcdef" for c in head):
            base = rest
    return base
