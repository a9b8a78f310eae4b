"""Raw Response: an upstream answer relayed to the caller byte-for-byte.

Invariants:
    - status_code, body and content_type are exactly what the upstream sent
    - location carries a redirect target through; no other header is relayed
    - No interpretation: a 500 from a function is a valid RawResponse, not an error
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: bytes
    content_type: str | None = None
    location: str | None = None
