#!/usr/bin/env python3
"""
DecisionLogger demo.

Run:
  python examples/logging/decision_logger_demo.py

Loads examples/rules.yaml (needs PyYAML), wires a JSON DecisionLogger and
fires an allowed, a denied and a failed check. Records go to stdout via the
'rolegate.audit' logger.
"""

import logging
import os

from rolegate import AccessEvaluator, AttributeRegistry, StaticRuleProvider
from rolegate.logging.decision_logger import DecisionLogger

RULES_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "rules.yaml")


def setup_logging() -> None:
    root = logging.getLogger()
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(name)s %(message)s"))
        root.addHandler(h)
    root.setLevel(logging.INFO)


def main() -> None:
    setup_logging()
    attrs: AttributeRegistry[dict] = AttributeRegistry()
    attrs.set("hasSuperPrivilege", lambda ctx: ctx.get("message") == "super")
    attrs.set("asyncAttribute", lambda ctx: True)
    # dailySchedule is left unregistered on purpose: editor checks fail closed

    evaluator = AccessEvaluator(
        attrs,
        StaticRuleProvider.from_file(RULES_PATH, validate_schema=False),
        logger_sink=DecisionLogger(as_json=True),
    )
    ctx = {"message": "super"}
    evaluator.check_sync(["writer"], "read", ctx)
    evaluator.check_sync(["writer"], "manage", ctx)
    evaluator.check_sync(["editor"], "update", ctx)


if __name__ == "__main__":
    main()
