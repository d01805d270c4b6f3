from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


class Progress:
    """
    Wraps an optional on_progress callback. Events are dicts:
    {"phase": "update.scan", "pct": 40, "msg": "..."}.
    """

    def __init__(self, on_progress: Optional[ProgressCallback] = None, step_pct: int = 10) -> None:
        self._cb = on_progress
        self._step = max(1, int(step_pct))
        self._last: Dict[str, int] = {}

    @property
    def enabled(self) -> bool:
        return self._cb is not None

    def emit(self, phase: str, pct: int, msg: str = "") -> None:
        if self._cb is None:
            return
        pct = max(0, min(100, int(pct)))
        self._last[phase] = pct
        try:
            self._cb({"phase": phase, "pct": pct, "msg": msg})
        except Exception:
            # a broken observer must not break the write path
            logger.exception("progress callback failed; disabling it")
            self._cb = None

    def tick(self, phase: str, done: int, total: int, msg: str = "") -> None:
        """Emit only when the percentage moved by at least step_pct."""
        if self._cb is None or total <= 0:
            return
        pct = int(done * 100 / total)
        prev = self._last.get(phase, 0)
        if pct - prev >= self._step or pct == 100:
            self.emit(phase, pct, msg)

    def begin(self, op: str, msg: str = "") -> None:
        self._last.clear()
        self.emit(f"{op}.start", 0, msg)

    def finish(self, op: str, msg: str = "") -> None:
        self.emit(f"{op}.done", 100, msg)
