"""Schemas for upstream draw payloads."""

from __future__ import annotations

from typing import Any

from marshmallow import INCLUDE, Schema, ValidationError, fields, validate

from lottery_sync.errors import InvalidResponseError


class DrawRecordSchema(Schema):
    """A draw result. Only the draw code is interpreted; other fields pass through."""

    class Meta:
        unknown = INCLUDE

    draw_code = fields.String(required=True, validate=validate.Length(min=1))


_draw_schema = DrawRecordSchema()


def load_draw(payload: Any) -> dict[str, Any]:
    """Validate one draw record and return it unchanged.

    Raises:
        InvalidResponseError: payload is not an object or has no usable draw code.
    """

    if not isinstance(payload, dict):
        raise InvalidResponseError(details={"payload": type(payload).__name__})

    try:
        _draw_schema.load(payload)
    except ValidationError as exc:
        raise InvalidResponseError(details=exc.messages) from exc

    # The validated copy may coerce values; the stored record must match upstream.
    return dict(payload)


def load_draws(items: list[Any]) -> list[dict[str, Any]]:
    return [load_draw(item) for item in items]
