"""
Filename sanitizing and stored-name generation.

The sanitized name is joined directly onto the upload root, so the output of
``sanitize`` must never contain a path separator or a ``..`` sequence.
"""

import random
import re
import time

_TRANSLITERATIONS = {
    "é": "e", "è": "e", "ê": "e", "ë": "e",
    "à": "a", "â": "a", "ä": "a", "á": "a", "ã": "a",
    "ù": "u", "û": "u", "ü": "u", "ú": "u",
    "ì": "i", "î": "i", "ï": "i", "í": "i",
    "ò": "o", "ô": "o", "ö": "o", "ó": "o", "õ": "o",
    "ñ": "n", "ç": "c",
    "É": "E", "È": "E", "Ê": "E", "Ë": "E",
    "À": "A", "Â": "A", "Ä": "A", "Á": "A", "Ã": "A",
    "Ù": "U", "Û": "U", "Ü": "U", "Ú": "U",
    "Ì": "I", "Î": "I", "Ï": "I", "Í": "I",
    "Ò": "O", "Ô": "O", "Ö": "O", "Ó": "O", "Õ": "O",
    "Ñ": "N", "Ç": "C",
}

_SYMBOLS = {
    " ": "_",
    "&": "and",
    "#": "hash",
    "%": "percent",
    "+": "plus",
    "=": "equals",
    "@": "at",
    "!": "exclamation",
    "$": "dollar",
    "^": "caret",
    "*": "asterisk",
}
_SYMBOLS.update({ch: "" for ch in "()[]{}|\\/:;\"'<>,?~`"})

_REPLACEMENTS = str.maketrans({**_TRANSLITERATIONS, **_SYMBOLS})
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]")
_DOT_RUN_RE = re.compile(r"\.{2,}")

_SUFFIX_RANDOM_BOUND = 1_000_000_000

# Common filesystem limit for a single path component, in bytes
MAX_NAME_BYTES = 255


def sanitize(raw: str) -> str:
    """Map any string to a filesystem-safe fragment. May return ``""``."""
    cleaned = raw.translate(_REPLACEMENTS)
    cleaned = _UNSAFE_RE.sub("", cleaned)
    cleaned = _DOT_RUN_RE.sub(".", cleaned)
    return cleaned.strip(".-")


def split_extension(filename: str) -> tuple[str, str]:
    """Split at the last dot. The extension keeps its dot; ``""`` when there is none."""
    idx = filename.rfind(".")
    if idx == -1:
        return filename, ""
    base, ext = filename[:idx], filename[idx:]
    # The extension is kept verbatim, so it must not carry a path component
    if "/" in ext or "\\" in ext or "\x00" in ext:
        return base, ""
    return base, ext


def unique_suffix() -> str:
    return f"{int(time.time() * 1000)}-{random.randrange(_SUFFIX_RANDOM_BOUND)}"


def make_stored_name(original_name: str) -> str:
    """Build the on-disk name: ``<sanitized base>-<millis>-<random><ext>``.

    The base is cut so the whole name fits in ``MAX_NAME_BYTES``. An extension
    too long to fit at all is dropped.
    """
    base, ext = split_extension(original_name)
    suffix = f"-{unique_suffix()}"
    if len(suffix) + len(ext.encode("utf-8")) > MAX_NAME_BYTES:
        ext = ""
    room = MAX_NAME_BYTES - len(suffix) - len(ext.encode("utf-8"))
    # sanitize() output is ASCII, so characters and bytes line up
    sanitized = sanitize(base)[:room].rstrip(".-")
    return f"{sanitized}{suffix}{ext}"
