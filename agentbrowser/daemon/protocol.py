"""JSON-lines protocol for daemon IPC.

One request and one response per connection, each a single line of UTF-8
JSON terminated by ``\\n``.

Request format:
    {
        "id": str,              # Client-generated correlation token
        "action": str,          # navigate | click | snapshot | ...
        ...                     # Action-specific fields (selector, url, ...)
    }

Response format:
    {
        "id": str,              # Echo of the request id (advisory)
        "success": bool,
        "data": Any,            # Action-specific payload, optional
        "error": str,           # Failure description, optional
    }
"""

import json
import secrets
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_request_id(length: int = 8) -> str:
    """Generate an opaque correlation token for one request."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class Request:
    """Command request from CLI to daemon."""
    action: str
    fields: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_request_id)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: id and action first, absent fields dropped."""
        payload: Dict[str, Any] = {"id": self.id, "action": self.action}
        # Fields never override the correlation token or the action tag
        payload.update({
            k: v for k, v in self.fields.items() if v is not None and k not in payload
        })
        return payload


@dataclass
class Response:
    """Response from daemon to CLI."""
    success: bool
    id: Optional[str] = None
    data: Any = None
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Response":
        return cls(
            success=payload.get("success") is True,
            id=payload.get("id"),
            data=payload.get("data"),
            error=payload.get("error"),
            raw=payload,
        )


def serialize_request(request: Request) -> bytes:
    """
    Serialize request to one newline-terminated line.

    json.dumps escapes control characters, so the encoded object never
    contains a raw newline.
    """
    return (json.dumps(request.to_dict()) + "\n").encode("utf-8")


def deserialize_response(data: bytes) -> Response:
    """
    Deserialize one response message.

    Args:
        data: UTF-8 encoded JSON bytes, without the line terminator

    Returns:
        Response

    Raises:
        ValueError: If data is not UTF-8 JSON describing an object
            (UnicodeDecodeError and json.JSONDecodeError are ValueErrors)
    """
    payload = json.loads(data.decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return Response.from_dict(payload)
