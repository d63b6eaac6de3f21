# token_client.py
"""
Outbound HTTP for the token exchange.

The handler only needs "POST some bytes, get a status and a body back", so
that is all a transport has to implement. Tests pass a stub with the same
`post` method instead of touching the network.
"""
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class TransportError(Exception):
    """The request never produced an HTTP response."""


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", "replace")


@runtime_checkable
class Transport(Protocol):
    def post(self, url: str, body: bytes, headers: dict, timeout: float) -> TransportResponse:
        ...


class UrllibTransport:
    def post(self, url, body, headers, timeout):
        try:
            req = urllib.request.Request(url, data=body, headers=headers, method="POST")
        except ValueError as e:
            raise TransportError(str(e)) from e

        try:
            with urllib.request.urlopen(req, timeout=timeout) as r:
                return TransportResponse(status=r.status, body=r.read())
        except urllib.error.HTTPError as e:
            # 4xx/5xx still carry the provider's body; hand it back as a response
            with e:
                try:
                    return TransportResponse(status=e.code, body=e.read())
                except OSError as read_err:
                    raise TransportError(str(read_err)) from read_err
        except urllib.error.URLError as e:
            raise TransportError(str(e.reason)) from e
        except (OSError, ValueError) as e:
            raise TransportError(str(e)) from e
