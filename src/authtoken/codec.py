"""Fixed-header AES-128-GCM token codec.

Tokens are JWE compact serializations using direct key agreement
(``alg=dir``) and ``enc=A128GCM``::

    base64url(header) . base64url(encrypted_key) . base64url(iv)
        . base64url(ciphertext) . base64url(tag)

The protected header never changes within a deployment, so the wire form
omits the first segment and its separator.  The encrypted key is always
empty under ``dir``, which means every wire token starts with ``.``.  The
receiver rebuilds the header segment before decrypting; because that
segment is the AEAD associated data, any byte difference from the header
used at encode time fails tag verification.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
import re
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import AuthTokenError, AuthTokenErrorCodes
from .models import TokenPayload

DEFAULT_HEADER: dict[str, str] = {"alg": "dir", "enc": "A128GCM", "typ": "JWT"}

_IV_SIZE = 12  # 96-bit IV recommended by NIST for AES-GCM
_TAG_SIZE = 16
_SEGMENTS = 5

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(data: str) -> bytes:
    """Decode unpadded base64url.

    Only the canonical encoding of a byte string is accepted, so characters
    outside the URL-safe alphabet and non-zero trailing bits are rejected.
    """
    if not _B64URL_RE.fullmatch(data):
        raise ValueError("Invalid base64url characters")
    raw = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    if base64url_encode(raw) != data:
        raise ValueError("Non-canonical base64url encoding")
    return raw


def canonical_json(value: Any) -> bytes:
    """Serialize *value* as compact JSON with sorted keys."""
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")


def _decrypt_failure(message: str, cause: Exception | None = None) -> AuthTokenError:
    return AuthTokenError(code=AuthTokenErrorCodes.DECRYPT_FAILURE, message=message, cause=cause)


class TokenCodec:
    """Encode and decode headless JWE tokens."""

    def __init__(self, header: dict[str, str] | None = None) -> None:
        header = dict(DEFAULT_HEADER if header is None else header)
        if header.get("alg") != "dir" or header.get("enc") != "A128GCM":
            raise ValueError("TokenCodec only supports alg=dir with enc=A128GCM")
        self._header_segment = base64url_encode(canonical_json(header))

    @property
    def header_segment(self) -> str:
        """base64url of the canonical protected header."""
        return self._header_segment

    def encode(self, payload: TokenPayload, key: bytes) -> str:
        """Encrypt *payload* and return the headless compact token.

        A fresh random IV is generated for every call, so identical
        payloads produce different tokens.
        """
        plaintext = canonical_json(payload.to_dict())
        iv = os.urandom(_IV_SIZE)
        sealed = AESGCM(key).encrypt(iv, plaintext, self._header_segment.encode("ascii"))
        ciphertext, tag = sealed[:-_TAG_SIZE], sealed[-_TAG_SIZE:]
        # encrypted_key segment is empty for alg=dir
        return ".".join(["", base64url_encode(iv), base64url_encode(ciphertext), base64url_encode(tag)])

    def decode(self, token: str, key: bytes) -> TokenPayload:
        """Decrypt a headless token produced by :meth:`encode`.

        Raises
        ------
        AuthTokenError
            ``DECRYPT_FAILURE`` for any malformed, tampered or foreign token,
            including one encrypted under a different key or header.
        """
        compact = f"{self._header_segment}.{token}"
        parts = compact.split(".")
        if len(parts) != _SEGMENTS:
            raise _decrypt_failure(f"Expected {_SEGMENTS} token segments, got {len(parts)}")
        header_b64, encrypted_key_b64, iv_b64, ciphertext_b64, tag_b64 = parts
        if encrypted_key_b64:
            raise _decrypt_failure("Encrypted key must be empty for alg=dir")

        try:
            iv = base64url_decode(iv_b64)
            ciphertext = base64url_decode(ciphertext_b64)
            tag = base64url_decode(tag_b64)
        except (binascii.Error, ValueError) as e:
            raise _decrypt_failure("Invalid base64url segment", e) from e
        if len(iv) != _IV_SIZE or len(tag) != _TAG_SIZE:
            raise _decrypt_failure("Invalid IV or tag length")

        try:
            plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, header_b64.encode("ascii"))
        except InvalidTag as e:
            raise _decrypt_failure("Token authentication failed", e) from e

        try:
            data = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise _decrypt_failure("Invalid token payload JSON", e) from e
        if not isinstance(data, dict):
            raise _decrypt_failure("Token payload must be a JSON object")
        try:
            return TokenPayload.from_dict(data)
        except ValueError as e:
            raise _decrypt_failure("Token payload is missing timestamps", e) from e
