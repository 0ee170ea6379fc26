"""Helpers for turning user supplied titles into stored filenames."""

MAX_TITLE_BYTES = 50
FALLBACK_TITLE = "image"

_REPLACEMENTS = str.maketrans({
    " ": "_",
    "/": "-",
    "\\": "-",
    ":": "-",
    "*": "-",
    "?": "-",
    '"': "-",
    "<": "-",
    ">": "-",
    "|": "-",
})


def sanitize_filename(title: str) -> str:
    """Replace path-unsafe characters and cap the result at 50 UTF-8 bytes.

    A multi-byte character straddling the limit is dropped rather than split.
    """
    cleaned = title.translate(_REPLACEMENTS)
    encoded = cleaned.encode("utf-8", errors="surrogatepass")
    if len(encoded) <= MAX_TITLE_BYTES:
        return cleaned
    return encoded[:MAX_TITLE_BYTES].decode("utf-8", errors="ignore")


def compose_filename(title: str, extension: str, timestamp: int) -> str:
    sanitized = sanitize_filename(title) or FALLBACK_TITLE
    return f"{timestamp}_{sanitized}{extension}"
