"""JSON Schema contracts for snapd responses.

Responses are validated right after parsing so that the typed models in
``daemon.models`` can decode them without ad hoc field checks.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator

from ..errors import ProtocolError

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "status-code": {"type": "integer"},
        "status": {"type": "string"},
        "change": {"type": "string"},
    },
}

ERROR_RESULT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "kind": {"type": "string"},
        "message": {"type": "string"},
    },
}

CHANGE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["status"],
    "properties": {
        "id": {"type": "string"},
        "kind": {"type": "string"},
        "summary": {"type": "string"},
        "status": {"type": "string"},
        "ready": {"type": "boolean"},
        "err": {"type": "string"},
    },
}

CHANNEL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "version": {"type": "string"},
        "confinement": {"type": "string"},
    },
}

FIND_RESULT_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name"],
        "properties": {
            "name": {"type": "string"},
            "channels": {
                "type": "object",
                "additionalProperties": CHANNEL_SCHEMA,
            },
        },
    },
}

SNAP_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "version": {"type": "string"},
        "channel": {"type": "string"},
        "confinement": {"type": "string"},
    },
}

SNAP_LIST_SCHEMA: Dict[str, Any] = {"type": "array", "items": SNAP_SCHEMA}


def validate_response(schema: Dict[str, Any], data: Any, context: str) -> None:
    """Strictly validate a decoded response fragment; raise ProtocolError on the first problem.

    Args:
        schema: Draft-07 JSON Schema dict.
        data:   Decoded fragment to validate.
        context: Short description of the fragment for the error message.
    """
    validator = Draft7Validator(schema)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ProtocolError(f"Invalid {context} at '{path}': {first.message}")
