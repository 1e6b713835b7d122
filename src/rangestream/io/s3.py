"""Ranged reader over a boto3-style S3 client.

The client is built and authenticated by the caller. The request template is
the keyword dict for ``get_object`` (``Bucket``, ``Key`` and optionally
``VersionId`` and friends); the range goes in as ``Range``.
"""

from typing import Any, Dict, Mapping


def object_request(bucket: str, key: str, **params) -> Dict[str, Any]:
    """Build the get_object keyword dict for one object."""
    return {"Bucket": bucket, "Key": key, **params}


class S3RangedReader:
    def __init__(self, client):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._client = client

    def content_length(self, request: Mapping[str, Any]) -> int:
        """Return ContentLength from head_object."""
        params = {k: v for k, v in request.items() if k != "Range"}
        response = self._client.head_object(**params)
        self.requests_made += 1
        return int(response["ContentLength"])

    def ranged_read(self, request: Mapping[str, Any], range_header: str) -> bytes:
        response = self._client.get_object(**{**request, "Range": range_header})
        self.requests_made += 1
        body = response["Body"]
        try:
            data = body.read()
        finally:
            close = getattr(body, "close", None)
            if close is not None:
                close()
        self.bytes_fetched += len(data)
        return data
