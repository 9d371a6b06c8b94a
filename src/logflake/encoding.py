"""Payload encoding: JSON text -> UTF-8 -> base64 -> Snappy block."""

from __future__ import annotations

import base64

import snappy

from .errors import EncodingError


def encode_payload(json_text: str) -> bytes:
    """
    Encode a serialized record into a request body.

    Raises:
        EncodingError: If the text cannot be encoded or compressed
    """
    try:
        raw = json_text.encode("utf-8")
        b64 = base64.b64encode(raw)
        return snappy.compress(b64)
    except Exception as e:
        raise EncodingError(f"Failed to encode payload: {e}") from e


def decode_payload(body: bytes) -> str:
    """Inverse of encode_payload, as performed by the ingestion service."""
    try:
        b64 = snappy.decompress(body)
        return base64.b64decode(b64, validate=True).decode("utf-8")
    except Exception as e:
        raise EncodingError(f"Failed to decode payload: {e}") from e
