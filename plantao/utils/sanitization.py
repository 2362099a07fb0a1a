import html
import re
from typing import Any, Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value.strip())
    return html.escape(value, quote=True)


def sanitize_dict(data: dict[str, Any], fields: Optional[list[str]] = None) -> dict[str, Any]:
    """
    Sanitize string values of a (possibly nested) dictionary.
    If fields is None, sanitizes all string values.
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if fields is not None and key not in fields:
            sanitized[key] = value
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, fields)
        elif isinstance(value, list):
            sanitized[key] = [
                sanitize_string(item) if isinstance(item, str) else item for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized
