from typing import Any, Dict, Sequence

_VALUE_ERROR_PREFIX = "Value error, "


def _field_label(loc: Sequence[Any]) -> str:
    # loc looks like ("body", "title") or ("path", "id"); keep the last named part
    for part in reversed(loc):
        if isinstance(part, str) and part not in ("body", "query", "path", "header"):
            return part
    return "request"


def format_validation_error(errors: Sequence[Dict[str, Any]]) -> str:
    """Turn the first pydantic error into one readable sentence."""
    if not errors:
        return "Invalid request"
    err = errors[0]
    label = _field_label(err.get("loc", ()))
    err_type = err.get("type", "")
    msg = str(err.get("msg", "Invalid value"))

    if err_type == "missing":
        return f"{label} is required"
    if err_type == "extra_forbidden":
        return f"Unknown field: {label}"
    if err_type == "json_invalid":
        return "Malformed JSON body"
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return f"{label}: {msg}"
