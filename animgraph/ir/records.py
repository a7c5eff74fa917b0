"""Raw document records and envelope schema.

Records mirror the key-normalized JSON document one-to-one and keep enum
fields as raw strings, so both the codec and the validator see exactly what
the author wrote before any default substitution.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator
from jsonschema import ValidationError as SchemaValidationError
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as RecordValidationError

from animgraph.ir.normalizer import normalize_keys

SUPPORTED_VERSIONS = (1,)
CURRENT_VERSION = 1


class GraphDecodeError(ValueError):
    """Raised when a document cannot be parsed at all."""


# Only the envelope is checked here; per-field rules live in the validator.
ENVELOPE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "transitions": {
            "type": ["array", "null"],
            "items": {"type": ["object", "null"]},
        },
    },
    "additionalProperties": True,
}

_ENVELOPE_VALIDATOR = Draft202012Validator(ENVELOPE_SCHEMA)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MotionRecord(_Record):
    animationname: Optional[str] = None
    threshold: Optional[float] = 0.0
    threshold2d: Optional[List[float]] = None


class BlendTreeRecord(_Record):
    parametername: Optional[str] = None
    parameternames: Optional[List[Optional[str]]] = None
    blendtype: Optional[str] = "oned"
    motions: Optional[List[Optional[MotionRecord]]] = None


class StateRecord(_Record):
    type: Optional[str] = "animation"
    animationname: Optional[str] = None
    blendtree: Optional[BlendTreeRecord] = None


class ConditionRecord(_Record):
    name: Optional[str] = None
    type: Optional[str] = "bool"
    boolvalue: Optional[bool] = False
    numbervalue: Optional[float] = 0.0
    comparison: Optional[str] = "equals"


class TransitionRecord(_Record):
    startstate: Optional[StateRecord] = None
    endstate: Optional[StateRecord] = None
    conditions: Optional[List[Optional[ConditionRecord]]] = None


class DocumentRecord(_Record):
    version: Optional[Any] = None
    transitions: Optional[List[Optional[TransitionRecord]]] = None


def load_payload(text: str) -> Dict[str, Any]:
    """Key-normalize and parse ``text``, then check the document envelope."""
    try:
        payload = json.loads(normalize_keys(text or ""))
    except json.JSONDecodeError as exc:
        raise GraphDecodeError(f"Invalid JSON: {exc}") from exc
    try:
        _ENVELOPE_VALIDATOR.validate(payload)
    except SchemaValidationError as exc:
        raise GraphDecodeError(f"Invalid document structure: {exc.message}") from exc
    return payload


def parse_document(text: str) -> DocumentRecord:
    payload = load_payload(text)
    try:
        return DocumentRecord.model_validate(payload)
    except RecordValidationError as exc:
        raise GraphDecodeError(f"Invalid field value: {exc}") from exc
