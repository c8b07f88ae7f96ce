from __future__ import annotations

from .attributes import AttributeRegistry
from .compiler import compile_inheritance, expand_role
from .engine import AccessEvaluator
from .errors import RolegateError, RuleTableError, UndefinedAttributeError, UnknownRoleError
from .model import Decision, InheritanceMap, RoleDefinition, RuleTable, build_rule_table
from .ports import DecisionLogSink, MetricsSink, RuleProvider

__all__ = [
    "AccessEvaluator",
    "AttributeRegistry",
    "Decision",
    "DecisionLogSink",
    "InheritanceMap",
    "MetricsSink",
    "RoleDefinition",
    "RolegateError",
    "RuleProvider",
    "RuleTable",
    "RuleTableError",
    "UndefinedAttributeError",
    "UnknownRoleError",
    "build_rule_table",
    "compile_inheritance",
    "expand_role",
]
