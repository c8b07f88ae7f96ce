from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Literal, Optional

logger = logging.getLogger("rolegate.store")

RulesFormat = Literal["json", "yaml"]


def detect_format(filename: Optional[str] = None, content_type: Optional[str] = None) -> RulesFormat:
    """Pick a parser: Content-Type first, then the file extension, else JSON."""
    if content_type:
        ct = content_type.lower()
        if "yaml" in ct or "yml" in ct:
            return "yaml"
        if "json" in ct:
            return "json"
    if filename:
        ext = os.path.splitext(filename)[1].lower()
        if ext in (".yaml", ".yml"):
            return "yaml"
    return "json"


def _parse_yaml(text: str) -> Any:
    import yaml  # optional dependency: rolegate[yaml]

    return yaml.safe_load(text)


def parse_rules_text(
    text: str,
    *,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Parse rule text (JSON or YAML) into a raw role mapping.

    Raises:
        ImportError: YAML input without PyYAML installed.
        json.JSONDecodeError: malformed JSON.
        ValueError: the document is not a mapping at the top level.
    """
    fmt = detect_format(filename, content_type)
    data = _parse_yaml(text) if fmt == "yaml" else json.loads(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"rules document must be a mapping at the top level, got {type(data).__name__}")
    return data


def load_rules_file(path: str, *, encoding: str = "utf-8") -> Dict[str, Any]:
    with open(path, "r", encoding=encoding) as f:
        text = f.read()
    data = parse_rules_text(text, filename=path)
    logger.debug("rolegate: loaded %d role definitions from %s", len(data), path)
    return data


__all__ = ["detect_format", "load_rules_file", "parse_rules_text"]
