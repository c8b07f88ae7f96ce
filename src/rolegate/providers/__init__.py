from __future__ import annotations

from .static import StaticRuleProvider

# Alias for tables parsed from JSON documents.
JsonRuleProvider = StaticRuleProvider

__all__ = ["JsonRuleProvider", "StaticRuleProvider"]
