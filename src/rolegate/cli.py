from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import __version__
from .core.attributes import AttributeRegistry
from .core.engine import AccessEvaluator
from .core.errors import RolegateError
from .providers.static import StaticRuleProvider
from .store.rules_loader import parse_rules_text

logger = logging.getLogger("rolegate.cli")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SCHEMA_ERRORS = 2
EXIT_RULE_ERRORS = 3
EXIT_ENV = 4
EXIT_DENIED = 5

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _print(data: Any, fmt: str = "text") -> None:
    if fmt == "json":
        sys.stdout.write(json.dumps(data, indent=2, sort_keys=True) + "\n")
        return
    text = data if isinstance(data, str) else str(data)
    sys.stdout.write(text if text.endswith("\n") else text + "\n")


def _read_doc(path: Optional[str]) -> Dict[str, Any]:
    if path is None or path == "-":
        return parse_rules_text(sys.stdin.read())
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return parse_rules_text(text, filename=path)


def _validate_doc(doc: Dict[str, Any]) -> List[Dict[str, str]]:
    from .dsl.validate import schema_errors

    return schema_errors(doc)


def _load_provider(ns: argparse.Namespace) -> Tuple[Optional[StaticRuleProvider], int]:
    fmt = getattr(ns, "format", "text")
    try:
        doc = _read_doc(getattr(ns, "rules", None))
        return StaticRuleProvider(doc), EXIT_OK
    except ImportError as e:
        _print(f"missing optional dependency: {e}")
        return None, EXIT_ENV
    except (OSError, ValueError, RolegateError) as e:
        _report_error(e, fmt)
        return None, EXIT_RULE_ERRORS


def _report_error(err: BaseException, fmt: str) -> None:
    if fmt == "json":
        _print({"error": str(err), "type": type(err).__name__}, "json")
    else:
        _print(f"error: {err}")


def _parse_attr_flags(values: Sequence[str] | None) -> Dict[str, bool]:
    """Parse ``NAME=true|false`` flags; a bare ``NAME`` means true."""
    out: Dict[str, bool] = {}
    for raw in values or ():
        name, sep, value = raw.partition("=")
        name = name.strip()
        if not name:
            raise ValueError(f"invalid --attr value: {raw!r}")
        if not sep:
            out[name] = True
            continue
        v = value.strip().lower()
        if v in _TRUE:
            out[name] = True
        elif v in _FALSE:
            out[name] = False
        else:
            raise ValueError(f"invalid boolean for attribute {name!r}: {value!r}")
    return out


# ----------------------------------------------------------------- commands


def cmd_validate(ns: argparse.Namespace) -> int:
    fmt = getattr(ns, "format", "text")
    try:
        doc = _read_doc(getattr(ns, "rules", None))
    except ImportError as e:
        _print(f"missing optional dependency: {e}")
        return EXIT_ENV
    except (OSError, ValueError) as e:
        _report_error(e, fmt)
        return EXIT_RULE_ERRORS

    if not getattr(ns, "skip_schema", False):
        try:
            issues = _validate_doc(doc)
        except RuntimeError as e:
            _print(str(e))
            return EXIT_ENV
        if issues:
            if fmt == "json":
                _print(issues, "json")
            else:
                _print("\n".join(f"{i['path']}: {i['message']}" for i in issues))
            return EXIT_SCHEMA_ERRORS

    try:
        StaticRuleProvider(doc)
    except RolegateError as e:
        if fmt == "json":
            _print([{"path": "/", "message": str(e)}], "json")
        else:
            _print(f"/: {e}")
        return EXIT_RULE_ERRORS

    _print([] if fmt == "json" else "OK", fmt)
    return EXIT_OK


def cmd_roles(ns: argparse.Namespace) -> int:
    fmt = getattr(ns, "format", "text")
    provider, rc = _load_provider(ns)
    if provider is None:
        return rc
    roles = list(getattr(ns, "roles", None) or provider.roles)
    try:
        mapping = provider.get_user_roles(roles)
    except RolegateError as e:
        _report_error(e, fmt)
        return EXIT_RULE_ERRORS
    if fmt == "json":
        _print(mapping, "json")
    else:
        _print("\n".join(f"{role}: {' '.join(chain)}" for role, chain in mapping.items()))
    return EXIT_OK


def cmd_check(ns: argparse.Namespace) -> int:
    fmt = getattr(ns, "format", "text")
    try:
        attr_values = _parse_attr_flags(getattr(ns, "attr", None))
        context = json.loads(ns.context) if getattr(ns, "context", None) else {}
    except ValueError as e:
        _print(f"error: {e}")
        return EXIT_USAGE

    provider, rc = _load_provider(ns)
    if provider is None:
        return rc

    registry: AttributeRegistry[Any] = AttributeRegistry()
    for name, value in attr_values.items():
        registry.set(name, lambda _ctx, _v=value: _v)

    evaluator: AccessEvaluator[Any] = AccessEvaluator(registry, provider)
    decision = evaluator.evaluate_sync(ns.roles, ns.permission, context)

    if fmt == "json":
        _print(
            {
                "allowed": decision.allowed,
                "permission": decision.permission,
                "reason": decision.reason,
                "roles": list(decision.roles),
                "active_roles": list(decision.active_roles),
                "error": str(decision.error) if decision.error is not None else None,
            },
            "json",
        )
    else:
        line = f"{decision.effect}: {decision.permission}"
        if decision.error is not None:
            line += f" ({decision.error})"
        _print(line)
    return EXIT_OK if decision.allowed else EXIT_DENIED


# ------------------------------------------------------------------- parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rolegate", description="rolegate rules tooling")
    parser.add_argument("--version", action="store_true", help="print version and exit")
    sub = parser.add_subparsers(dest="command")

    def _common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--rules", "-r", default=None, help="rules file (JSON or YAML); stdin if omitted")
        p.add_argument("--format", choices=("text", "json"), default="text")

    p_val = sub.add_parser("validate", help="validate and compile a rules file")
    _common(p_val)
    p_val.add_argument("--skip-schema", action="store_true", help="only compile, skip JSON-Schema validation")
    p_val.set_defaults(func=cmd_validate)

    p_roles = sub.add_parser("roles", help="print roles with their inherited roles")
    _common(p_roles)
    p_roles.add_argument("roles", nargs="*", help="roles to expand (default: all)")
    p_roles.set_defaults(func=cmd_roles)

    p_check = sub.add_parser("check", help="check whether roles grant a permission")
    _common(p_check)
    p_check.add_argument("roles", nargs="+", help="roles held by the principal")
    p_check.add_argument("--permission", "-p", required=True)
    p_check.add_argument(
        "--attr",
        action="append",
        default=[],
        metavar="NAME=BOOL",
        help="register a constant attribute predicate (repeatable)",
    )
    p_check.add_argument("--context", default=None, help="JSON object passed to predicates")
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(list(argv) if argv is not None else None)
    if ns.version:
        _print(f"rolegate {__version__}")
        return EXIT_OK
    func = getattr(ns, "func", None)
    if func is None:
        parser.print_usage(sys.stdout)
        return EXIT_USAGE
    logger.debug("rolegate: running command %s", ns.command)
    rc = func(ns)
    return rc if isinstance(rc, int) else EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
