from __future__ import annotations

import json
import logging
import random
from typing import Any, Dict

from ..core.ports import DecisionLogSink


class DecisionLogger(DecisionLogSink):
    """Writes one audit record per access decision to the ``rolegate.audit`` logger.

    Args:
        sample_rate: fraction of allowed decisions to log, in ``[0, 1]``.
        always_log_denied: log every denial and error regardless of sampling.
        as_json: emit the payload as a JSON object instead of ``key=value`` text.
        level: logging level used for the records.
    """

    def __init__(
        self,
        *,
        sample_rate: float = 1.0,
        always_log_denied: bool = True,
        as_json: bool = False,
        level: int = logging.INFO,
        logger_name: str = "rolegate.audit",
    ) -> None:
        if not 0.0 <= float(sample_rate) <= 1.0:
            raise ValueError("sample_rate must be within [0, 1]")
        self.sample_rate = float(sample_rate)
        self.always_log_denied = bool(always_log_denied)
        self.as_json = bool(as_json)
        self.level = level
        self.logger = logging.getLogger(logger_name)

    def _sampled(self, payload: Dict[str, Any]) -> bool:
        if self.always_log_denied and not payload.get("allowed", False):
            return True
        if self.sample_rate >= 1.0:
            return True
        if self.sample_rate <= 0.0:
            return False
        return random.random() < self.sample_rate

    def log(self, payload: Dict[str, Any]) -> None:
        if not self._sampled(payload):
            return
        if self.as_json:
            msg = json.dumps(payload, sort_keys=True, default=str)
        else:
            parts = [f"{k}={payload[k]}" for k in sorted(payload)]
            msg = "decision " + " ".join(parts)
        self.logger.log(self.level, msg)


__all__ = ["DecisionLogger"]
