"""Typed exceptions for the link protocol.

Public codec and sync entry points never let these escape: they are raised
inside the token pipeline and converted to ``None`` or an error string at the
boundary, so a corrupted link can never crash the caller.
"""


class SpacesError(Exception):
    """Base exception for link protocol failures."""


class TokenError(SpacesError):
    """A share token could not be turned back into bytes or a payload."""


class MalformedTokenError(TokenError):
    """Token text is not valid base64url or does not inflate."""


class UnsupportedTokenVersionError(TokenError):
    """Token envelope carries a version this build does not read."""

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"unsupported token version: {version!r}")


class ChecksumMismatchError(TokenError):
    """Payload checksum does not match the checksum recorded in the envelope."""

    def __init__(self, *, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"checksum mismatch: expected {expected}, got {actual}")


class TokenTooLongError(SpacesError):
    """Encoded token exceeds the configured maximum share length."""

    def __init__(self, *, length: int, max_length: int) -> None:
        self.length = length
        self.max_length = max_length
        super().__init__(f"token length {length} exceeds maximum {max_length}")
