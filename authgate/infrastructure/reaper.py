# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Periodic token reaping in a daemon thread."""

from __future__ import annotations

import threading

from authgate.application.use_cases.users.reap_tokens import ReapTokensUseCase
from authgate.shared.errors import AppError
from authgate.shared.logging import logger


class TokenReaper:
    def __init__(self, reap: ReapTokensUseCase, *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._reap = reap
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        try:
            return self._reap.execute()
        except AppError:
            logger.exception("tokens.reaper: pass failed")
            return 0

    def _loop(self) -> None:
        logger.info(f"tokens.reaper: started, interval={self._interval}s")
        while not self._stop.wait(self._interval):
            self.run_once()
        logger.info("tokens.reaper: stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="token-reaper", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
