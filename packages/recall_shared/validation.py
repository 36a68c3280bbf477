"""Shared request validation helpers for public service APIs."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from packages.recall_shared.errors import RecallValidationError, codes

TRequest = TypeVar("TRequest", bound=BaseModel)


def validate_request(model: type[TRequest], payload: Mapping[str, Any]) -> TRequest:
    """Validate one request payload, raising ``RecallValidationError`` on failure.

    The error message names the first offending field as ``"<field>: <msg>"``.
    """
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        issue = exc.errors()[0]
        field = ".".join(str(item) for item in issue.get("loc", ()))
        field_name = field if field else "payload"
        message = f"{field_name}: {issue.get('msg', 'invalid value')}"
        raise RecallValidationError(
            message,
            code=codes.INVALID_ARGUMENT,
            metadata={"field": field_name},
        ) from exc
