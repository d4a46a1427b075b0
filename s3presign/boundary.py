"""Message boundary for embedding the signer in another runtime.

A host process talks to the signer by exchanging JSON documents as byte
strings, for example over a pipe (see the --stdin CLI mode). Both the request
and the response are owned buffers: nothing returned refers to memory the
signer keeps, and secret values are never echoed back.

Requests:
    {"op": "derive_signing_key", "secret_access_key": ..., "date": "YYYYMMDD",
     "region": ...}
    {"op": "sign_url", "request": {"object_key": ..., "bucket": ...,
     "endpoint_host": ..., "access_key_id": ..., "secret_access_key": ...,
     "timestamp": "2023-01-01T00:00:00Z", "http_method": "GET",
     "region": "auto", "expires_in": 84600, "signing_key": "<hex>"}}

Responses:
    {"ok": true, "signing_key": "<hex>", "length": 32}
    {"ok": true, "url": "...", "length": <len(url)>}
    {"ok": false, "error": {"type": ..., "message": ...}}
"""

import json
import re
from typing import Any, Callable

from s3presign.models import PrecomputedSigningKey, new_request
from s3presign.signer import sign_url
from s3presign.signing_key import derive_signing_key
from s3presign.validation import InvalidRequestError, parse_timestamp

_DATE_RE = re.compile(r"[0-9]{8}")

REQUIRED_REQUEST_FIELDS = (
    "object_key",
    "bucket",
    "endpoint_host",
    "access_key_id",
    "secret_access_key",
    "timestamp",
)
OPTIONAL_REQUEST_FIELDS = ("http_method", "region", "expires_in", "signing_key")


class BoundaryError(ValueError):
    """Raised when a message is not a well-formed boundary request."""

    pass


def _require_str(message: dict, name: str) -> str:
    value = message.get(name)
    if not isinstance(value, str) or not value:
        raise BoundaryError(f"'{name}' must be a non-empty string")
    return value


def _derive(message: dict) -> dict[str, Any]:
    secret = _require_str(message, "secret_access_key")
    date = _require_str(message, "date")
    region = _require_str(message, "region")
    if not _DATE_RE.fullmatch(date):
        raise BoundaryError("'date' must be formatted as YYYYMMDD")

    key = derive_signing_key(secret, date, region)
    return {"ok": True, "signing_key": key.hex(), "length": len(key)}


def _sign(message: dict) -> dict[str, Any]:
    fields = message.get("request")
    if not isinstance(fields, dict):
        raise BoundaryError("'request' must be a JSON object")

    unknown = set(fields) - set(REQUIRED_REQUEST_FIELDS) - set(OPTIONAL_REQUEST_FIELDS)
    if unknown:
        raise BoundaryError(f"Unknown request fields: {', '.join(sorted(unknown))}")
    missing = [name for name in REQUIRED_REQUEST_FIELDS if name not in fields]
    if missing:
        raise BoundaryError(f"Missing request fields: {', '.join(missing)}")

    values = dict(fields)
    values["timestamp"] = parse_timestamp(fields["timestamp"])
    if "signing_key" in fields:
        try:
            values["signing_key"] = PrecomputedSigningKey(bytes.fromhex(fields["signing_key"]))
        except (TypeError, ValueError) as e:
            raise BoundaryError("'signing_key' must be a hex string") from e

    url = sign_url(new_request(**values))
    return {"ok": True, "url": url, "length": len(url)}


OPERATIONS: dict[str, Callable[[dict], dict[str, Any]]] = {
    "derive_signing_key": _derive,
    "sign_url": _sign,
}


def _error(kind: str, message: str) -> dict[str, Any]:
    return {"ok": False, "error": {"type": kind, "message": message}}


def handle_message(payload: bytes) -> bytes:
    """Handle one JSON request and return the JSON response.

    Never raises for bad input; failures come back as error envelopes.
    """
    try:
        message = json.loads(payload)
        if not isinstance(message, dict):
            raise BoundaryError("Message must be a JSON object")

        op = message.get("op")
        handler = OPERATIONS.get(op) if isinstance(op, str) else None
        if handler is None:
            raise BoundaryError(
                f"Unknown op; expected one of: {', '.join(sorted(OPERATIONS))}"
            )
        response = handler(message)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        response = _error("BoundaryError", f"Message is not valid JSON: {e}")
    except RecursionError:
        response = _error("BoundaryError", "Message is nested too deeply")
    except InvalidRequestError as e:
        response = _error("InvalidRequestError", str(e))
    except BoundaryError as e:
        response = _error("BoundaryError", str(e))

    return json.dumps(response).encode("utf-8")
