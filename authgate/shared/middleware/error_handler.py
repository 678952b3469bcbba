# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from werkzeug.exceptions import MethodNotAllowed

from authgate.shared.errors import register_error_handler
from authgate.shared.errors.http import render_method_not_allowed


def configure_error_handling(app: Flask, *, debug_mode: bool = False) -> None:
    register_error_handler(app, debug_mode=debug_mode)
    # 405 from werkzeug routing uses the same JSON shape as everything else
    app.register_error_handler(MethodNotAllowed, render_method_not_allowed)
