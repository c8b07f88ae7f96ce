from __future__ import annotations

from .rules_loader import detect_format, load_rules_file, parse_rules_text

__all__ = ["detect_format", "load_rules_file", "parse_rules_text"]
