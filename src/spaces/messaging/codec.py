"""Share-token codec: GameState <-> URL-safe compressed string.

Token layout
------------
    token    = base64url_nopad(zlib(msgpack(envelope)))
    envelope = {"v": TOKEN_VERSION, "c": checksum, "s": payload}
    payload  = GameState JSON-mode dump without ``checksum`` and None fields
    checksum = hex(sha256(msgpack(payload))[:8])

The checksum catches accidental corruption (a chat app truncating or mangling
a pasted link). It is not a signature: anyone can build a valid token.

Both public functions are total. ``encode_game_state`` returns None when the
state cannot be shared, ``decode_game_state`` returns None for anything that is
not a complete, valid token. Decoding is all-or-nothing.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
import zlib
from typing import Any
from urllib.parse import unquote

import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from spaces.logic.exceptions import (
    ChecksumMismatchError,
    MalformedTokenError,
    TokenError,
    TokenTooLongError,
    UnsupportedTokenVersionError,
)
from spaces.logic.state import GameState
from spaces.messaging.encoder import MAX_BUFFER_LEN, DecodeError, decode, encode

logger = structlog.get_logger()

TOKEN_VERSION = 1
DEFAULT_MAX_TOKEN_LENGTH = 16000
CHECKSUM_BYTES = 8
ZLIB_LEVEL = 9

_TOKEN_CHARS = re.compile(r"^[A-Za-z0-9_-]+$")
_WHITESPACE = re.compile(r"\s+")


def _dump_payload(state: GameState) -> dict[str, Any]:
    return state.model_dump(mode="json", exclude={"checksum"}, exclude_none=True)


def _checksum(payload_bytes: bytes) -> str:
    return hashlib.sha256(payload_bytes).digest()[:CHECKSUM_BYTES].hex()


def compute_checksum(state: GameState) -> str:
    """Checksum the codec records for ``state``; independent of its current ``checksum`` field."""
    return _checksum(encode(_dump_payload(state)))


def _to_token(state: GameState) -> str:
    payload = _dump_payload(state)
    # actions build states without validation; refuse what no decoder would accept
    GameState.model_validate(payload)
    envelope = {"v": TOKEN_VERSION, "c": _checksum(encode(payload)), "s": payload}
    compressed = zlib.compress(encode(envelope), ZLIB_LEVEL)
    return base64.urlsafe_b64encode(compressed).rstrip(b"=").decode("ascii")


def encode_game_state(state: GameState, max_length: int = DEFAULT_MAX_TOKEN_LENGTH) -> str | None:
    """Serialize ``state`` to a share token, or None when it cannot be shared."""
    try:
        token = _to_token(state)
        if len(token) > max_length:
            raise TokenTooLongError(length=len(token), max_length=max_length)
    except TokenTooLongError as e:
        logger.warning("game state too large to share", length=e.length, max_length=e.max_length)
        return None
    except ValidationError as e:
        logger.warning("refusing to share invalid game state", errors=e.error_count())
        return None
    except (PydanticSerializationError, TypeError, ValueError, OverflowError) as e:
        logger.warning("failed to encode game state", error=str(e))
        return None
    return token


def normalize_token(raw: str) -> str:
    """
    Recover the bare token from whatever the user pasted.

    Accepts a full URL, a ``#fragment``, surrounding or wrapped whitespace, and
    percent-encoding added by link re-encoders.
    """
    text = _WHITESPACE.sub("", raw)
    _, hash_mark, fragment = text.partition("#")
    if hash_mark:
        text = fragment
    return unquote(text)


def _inflate(token: str) -> bytes:
    if not _TOKEN_CHARS.match(token):
        raise MalformedTokenError("token contains characters outside base64url")
    try:
        compressed = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"invalid base64url: {e}") from e

    inflater = zlib.decompressobj()
    try:
        data = inflater.decompress(compressed, MAX_BUFFER_LEN)
    except zlib.error as e:
        raise MalformedTokenError(f"invalid compressed data: {e}") from e
    if inflater.unconsumed_tail:
        raise MalformedTokenError("decompressed payload exceeds size limit")
    if not inflater.eof or inflater.unused_data:
        raise MalformedTokenError("compressed stream is truncated or has trailing data")
    return data


def _open_envelope(data: bytes) -> dict[str, Any]:
    envelope = decode(data)
    version = envelope.get("v")
    if version != TOKEN_VERSION:
        raise UnsupportedTokenVersionError(version)
    payload = envelope.get("s")
    recorded = envelope.get("c")
    if not isinstance(payload, dict) or not isinstance(recorded, str):
        raise MalformedTokenError("envelope is missing its payload or checksum")
    actual = _checksum(encode(payload))
    if actual != recorded:
        raise ChecksumMismatchError(expected=recorded, actual=actual)
    return {**payload, "checksum": recorded}


def decode_game_state(raw: str) -> GameState | None:
    """Parse a share token (or a pasted link) back into a GameState, or None."""
    token = normalize_token(raw)
    if not token:
        return None
    try:
        return GameState.model_validate(_open_envelope(_inflate(token)))
    except (TokenError, DecodeError) as e:
        logger.debug("rejected share token", reason=str(e), error_type=type(e).__name__)
    except ValidationError as e:
        logger.debug("share token failed schema validation", errors=e.error_count())
    return None


def compression_ratio(state: GameState) -> float:
    """Token length relative to the plain JSON dump. Debugging aid."""
    token = encode_game_state(state, max_length=MAX_BUFFER_LEN)
    if token is None:
        return 0.0
    return len(token) / len(state.model_dump_json())
