import re
from typing import Final

# an unterminated tag runs to the end of the string
_TAG: Final[re.Pattern[str]] = re.compile(r"<[^>]*>?")


def sanitize_string(value: str) -> str:
    """Trim, strip markup and drop non-printable characters."""
    value = _TAG.sub("", value.strip())
    return "".join(ch for ch in value if ch.isprintable()).strip()


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )
