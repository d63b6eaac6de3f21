import pytest

from cognito_config import CognitoConfig
from token_client import TransportError, TransportResponse

ENV = {
    "CLIENT_ID": "abc123client",
    "CLIENT_SECRET": "s3cr3t",
    "API_GW_ID": "gw42xyz",
    "AWS_REGION": "us-east-1",
}


class StubTransport:
    """Records every post and answers with a canned response or error."""

    def __init__(self, status=200, body=b"", error=None):
        self.status = status
        self.body = body
        self.error = error
        self.calls = []

    def post(self, url, body, headers, timeout):
        self.calls.append({"url": url, "body": body, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return TransportResponse(status=self.status, body=self.body)


@pytest.fixture
def env():
    return dict(ENV)


@pytest.fixture
def config(env):
    return CognitoConfig.from_env(env)


@pytest.fixture
def refused():
    return StubTransport(error=TransportError("[Errno 111] Connection refused"))
