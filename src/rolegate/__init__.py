from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version
except Exception:  # pragma: no cover
    PackageNotFoundError = Exception  # type: ignore[assignment,misc]
    version = None  # type: ignore[assignment]

from . import core, providers, store
from .core.attributes import AttributeRegistry
from .core.compiler import compile_inheritance
from .core.engine import AccessEvaluator
from .core.errors import RolegateError, RuleTableError, UndefinedAttributeError, UnknownRoleError
from .core.model import Decision, RoleDefinition, build_rule_table
from .core.ports import RuleProvider
from .providers.static import StaticRuleProvider
from .store.rules_loader import load_rules_file, parse_rules_text


def _detect_version() -> str:
    if version is None:
        return "0.1.0"
    try:
        return version("rolegate")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _detect_version()

__all__ = [
    "AccessEvaluator",
    "AttributeRegistry",
    "Decision",
    "RoleDefinition",
    "RolegateError",
    "RuleProvider",
    "RuleTableError",
    "StaticRuleProvider",
    "UndefinedAttributeError",
    "UnknownRoleError",
    "build_rule_table",
    "compile_inheritance",
    "core",
    "load_rules_file",
    "parse_rules_text",
    "providers",
    "store",
    "__version__",
]
