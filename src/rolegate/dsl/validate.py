from __future__ import annotations

from typing import Any, Dict, List

_NAME_LIST: Dict[str, Any] = {
    "type": "array",
    "items": {"type": "string", "minLength": 1},
}

RULES_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "rolegate rules",
    "type": "object",
    "propertyNames": {"minLength": 1},
    "additionalProperties": {
        "type": ["object", "null"],
        "properties": {
            "permissions": _NAME_LIST,
            "inherited": _NAME_LIST,
            "attributes": _NAME_LIST,
        },
        "additionalProperties": False,
    },
}


def _validator() -> Any:
    try:
        from jsonschema import Draft202012Validator  # type: ignore[import-untyped]
    except Exception as e:  # pragma: no cover - exercised via monkeypatch
        raise RuntimeError(
            "Install rolegate[validate] to enable schema validation"
        ) from e
    return Draft202012Validator(RULES_SCHEMA)


def validate_rules(doc: Any) -> None:
    """Raise ``jsonschema.ValidationError`` for the first schema violation."""
    _validator().validate(doc)


def schema_errors(doc: Any) -> List[Dict[str, str]]:
    """Return every schema violation as ``{"path": ..., "message": ...}``."""
    out: List[Dict[str, str]] = []
    errors = sorted(_validator().iter_errors(doc), key=lambda e: list(map(str, e.absolute_path)))
    for err in errors:
        path = "/".join(str(p) for p in err.absolute_path)
        out.append({"path": path or "/", "message": err.message})
    return out


__all__ = ["RULES_SCHEMA", "schema_errors", "validate_rules"]
