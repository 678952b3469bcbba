# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def describe_form_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Field names and pydantic error types, without the submitted values."""
    problems: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False, include_context=False, include_input=False):
        field = ".".join(str(part) for part in error.get("loc", ())) or "form"
        problems.setdefault(field, []).append(error.get("type", "value_error"))
    return {"fields": sorted(problems), "problems": problems}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=describe_form_errors(exc)) from exc


__all__ = ["describe_form_errors", "raise_validation_error"]
