from typing import Any, Optional


def norm_str(s: Any) -> Optional[str]:
    """Trimmed text, or None for non-strings and blank strings."""
    if isinstance(s, str):
        s = s.strip()
        return s or None
    return None


def norm_text(s: Any) -> str:
    return norm_str(s) or ""
