from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from .model import LabConfiguration

logger = logging.getLogger(__name__)

Listener = Callable[[LabConfiguration, LabConfiguration], None]


class LabConfigStore:
    """Holds the current ``LabConfiguration`` snapshot.

    Readers get an immutable snapshot; writers build a new one from the
    current snapshot, persist it and swap the reference under one lock, so a
    request never sees a half-applied update and two partial updates cannot
    interleave. ``path=None`` keeps the configuration in memory only.
    """

    def __init__(self, path: Optional[str | Path] = None, *, defaults: Optional[LabConfiguration] = None):
        self._path = Path(path) if path else None
        self._defaults = defaults or LabConfiguration()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._current = self._load()

    def _load(self) -> LabConfiguration:
        if self._path is None:
            return self._defaults
        if not self._path.exists():
            logger.info("No lab configuration at %s, writing defaults", self._path)
            self._write(self._defaults)
            return self._defaults
        try:
            doc = json.loads(self._path.read_text(encoding="utf-8"))
            config = LabConfiguration.from_document(doc, defaults=self._defaults)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error("Could not read lab configuration %s (%s); using defaults", self._path, e)
            return self._defaults

        errors = config.validate()
        if errors:
            logger.error("Invalid lab configuration %s (%s); using defaults", self._path, "; ".join(errors))
            return self._defaults
        return config

    def _write(self, config: LabConfiguration) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".lab-config-", suffix=".json", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config.to_document(), f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get(self) -> LabConfiguration:
        return self._current

    def apply(self, build: Callable[[LabConfiguration], LabConfiguration]) -> LabConfiguration:
        """Replace the snapshot with ``build(current)``.

        ``build`` runs under the store lock and may raise to reject the
        change; nothing is written or notified in that case.
        """
        with self._lock:
            previous = self._current
            updated = build(previous)
            self._write(updated)
            self._current = updated

        for listener in list(self._listeners):
            try:
                listener(previous, updated)
            except Exception:
                logger.exception("Lab configuration listener failed")
        return updated

    def update(self, **changes) -> LabConfiguration:
        return self.apply(lambda current: replace(current, **changes))

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)
