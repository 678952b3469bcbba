# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig


from .logger import (
    NO_REQUEST,
    clear_request_id,
    get_request_id,
    logger,
    set_request_id,
    setup_logging,
)
from .sensitive_filter import sanitize_message

__all__ = [
    "NO_REQUEST",
    "clear_request_id",
    "get_request_id",
    "logger",
    "sanitize_message",
    "set_request_id",
    "setup_logging",
]
