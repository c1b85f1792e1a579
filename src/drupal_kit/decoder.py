"""Response body decoding.

Drupal signals many failures with a well-formed JSON body such as
``{"message": "Access denied"}``, sometimes alongside a 200 status. A body
is therefore only accepted when it parses and is not such an envelope.
"""

import json
from typing import Any

from .exceptions import MalformedResponseError, RemoteError

BODY_EXCERPT_LENGTH = 500


def decode_response(body: str, status_code: int | None = None) -> Any:
    """Parse a response body, failing on malformed bodies and error envelopes.

    Args:
        body: Raw response text
        status_code: HTTP status, only used to enrich errors

    Returns:
        The parsed JSON value

    Raises:
        MalformedResponseError: If the body is not valid JSON
        RemoteError: If the body is an object with a ``message`` field

    Example:
        >>> decode_response('{"nid": [{"value": 1}]}')
        {'nid': [{'value': 1}]}
        >>> decode_response('{"message": "Not found"}')
        Traceback (most recent call last):
        ...
        drupal_kit.exceptions.RemoteError: Not found
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(
            body[:BODY_EXCERPT_LENGTH],
            details={"status_code": status_code},
        ) from e

    if isinstance(data, dict) and "message" in data:
        raise RemoteError(str(data["message"]), status_code=status_code, details=data)

    return data
