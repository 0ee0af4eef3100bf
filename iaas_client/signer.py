"""Signer - Signs request parameters with the account's secret key.

String to sign:

    GET\\n/iaas/\\naccess_key_id=...&action=...&signature_method=HmacSHA256&...

Pairs are sorted by key (stable, so repeated keys keep their marshalled
order), keys and values percent-encoded with only A-Za-z0-9-_.~ left as is.
The signature is base64(HMAC(secret, string_to_sign)).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from iaas_client.models import Config, SignedRequest
from iaas_client.schema import format_time

logger = logging.getLogger(__name__)

Parameters = list[tuple[str, str]]

SIGNATURE_VERSION = "1"

_DIGESTS = {
    "HmacSHA256": hashlib.sha256,
    "HmacSHA1": hashlib.sha1,
}

_IDENTITY_KEYS = frozenset(
    {"access_key_id", "signature_method", "signature_version", "time_stamp", "expires", "signature"}
)


def _escape(text: str) -> str:
    # quote() with safe="" leaves exactly the unreserved set; spaces become %20
    return quote(text, safe="")


def canonical_query(params: Parameters) -> str:
    """Render parameters in canonical order without touching the input list."""
    parts: list[str] = []
    for key, value in sorted(params, key=lambda pair: pair[0]):
        value = value.strip()
        if value:
            parts.append(f"{_escape(key)}={_escape(value)}")
        else:
            parts.append(_escape(key))
    return "&".join(parts)


class Signer:
    """Adds identity parameters and an HMAC signature to a parameter list.

    Usage:
        signer = Signer.from_config(config)
        signed = signer.sign(params, "GET", "/iaas/")
    """

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        signature_method: str = "HmacSHA256",
        expires_in: int | None = None,
    ) -> None:
        if signature_method not in _DIGESTS:
            raise ValueError(f"Unsupported signature method: {signature_method}")
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._signature_method = signature_method
        self._expires_in = expires_in

    @classmethod
    def from_config(cls, config: Config) -> "Signer":
        return cls(
            config.access_key_id,
            config.secret_access_key,
            signature_method=config.signature_method,
            expires_in=config.signature_expires_in,
        )

    def identity_params(self, timestamp: datetime) -> Parameters:
        """Identity and freshness parameters for one request."""
        params: Parameters = [
            ("access_key_id", self._access_key_id),
            ("signature_method", self._signature_method),
            ("signature_version", SIGNATURE_VERSION),
        ]
        if self._expires_in is not None:
            params.append(("expires", format_time(timestamp + timedelta(seconds=self._expires_in))))
        else:
            params.append(("time_stamp", format_time(timestamp)))
        return params

    def string_to_sign(self, method: str, path: str, params: Parameters) -> str:
        return f"{method.upper()}\n{path}\n{canonical_query(params)}"

    def compute_signature(self, string_to_sign: str) -> str:
        digest = hmac.new(
            self._secret_access_key.encode("utf-8"),
            string_to_sign.encode("utf-8"),
            _DIGESTS[self._signature_method],
        ).digest()
        return base64.b64encode(digest).decode("ascii").strip()

    def sign(
        self,
        params: Parameters,
        method: str,
        path: str,
        timestamp: datetime | None = None,
    ) -> SignedRequest:
        """Sign a marshalled parameter list.

        Args:
            params: Marshalled parameters (left unmodified).
            method: HTTP method of the request.
            path: Request path, e.g. "/iaas/".
            timestamp: Signing time; now (UTC) if None.

        Returns:
            SignedRequest whose params keep the marshalled order (values
            stripped of surrounding whitespace), followed by the identity
            parameters and the signature.
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        # Identity keys supplied by the caller are replaced, not duplicated.
        # Values are stripped here so the sent pairs match the signed ones.
        unsigned = [(k, v.strip()) for k, v in params if k not in _IDENTITY_KEYS]
        unsigned.extend(self.identity_params(timestamp))

        string_to_sign = self.string_to_sign(method, path, unsigned)
        signature = self.compute_signature(string_to_sign)

        logger.debug("String to sign: %s", string_to_sign)

        return SignedRequest(
            method=method.upper(),
            path=path,
            params=[*unsigned, ("signature", signature)],
            string_to_sign=string_to_sign,
            signature=signature,
        )
