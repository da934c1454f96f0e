"""Header-based credential check shared by the HTTP and function transports."""

from __future__ import annotations

from collections.abc import Mapping

_BEARER = "bearer "


def extract_credential(headers: Mapping[str, str]) -> str:
    """Return the key from ``Authorization: Bearer`` or ``X-Api-Key``, or ``""``."""
    lowered = {str(k).lower(): str(v) for k, v in headers.items()}
    authorization = lowered.get("authorization", "")
    if authorization.lower().startswith(_BEARER):
        return authorization[len(_BEARER):].strip()
    return lowered.get("x-api-key", "").strip()


def is_authorized(headers: Mapping[str, str], secret: str | None) -> bool:
    """Compare the caller's credential with *secret*.

    A missing *secret* rejects every caller.
    """
    if not secret:
        return False
    provided = extract_credential(headers)
    # Plain equality against a single static secret.
    return bool(provided) and provided == secret
