# cognito_config.py
import os
import base64
import logging
import urllib.parse
from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError

logger = logging.getLogger()

COGNITO_DOMAIN_PREFIX = "tech-challenge-grp36"
API_STAGE = "default"
API_GATEWAY_PATH = "cognito-callback"
SIGN_IN_SCOPES = "email openid phone"


def _profile_region():
    # Outside Lambda, fall back to whatever the local AWS profile says
    try:
        return boto3.session.Session().region_name or ""
    except BotoCoreError as e:
        logger.warning("Could not resolve AWS region from profile: %s", e)
        return ""


@dataclass(frozen=True)
class CognitoConfig:
    client_id: str
    client_secret: str
    api_gateway_id: str
    region: str

    @classmethod
    def from_env(cls, environ=None):
        """Build the config from environment variables.

        `environ` defaults to os.environ, in which case a missing AWS_REGION
        is filled in from the local AWS profile. An explicit mapping is the
        only input: a region it lacks stays empty.
        """
        use_process_env = environ is None
        if use_process_env:
            environ = os.environ

        region = environ.get("AWS_REGION", "")
        if not region and use_process_env:
            region = _profile_region()

        return cls(
            client_id=environ.get("CLIENT_ID", ""),
            client_secret=environ.get("CLIENT_SECRET", ""),
            api_gateway_id=environ.get("API_GW_ID", ""),
            region=region,
        )

    @property
    def cognito_host(self) -> str:
        return f"{COGNITO_DOMAIN_PREFIX}.auth.{self.region}.amazoncognito.com"

    @property
    def redirect_url(self) -> str:
        return (
            f"https://{self.api_gateway_id}.execute-api.{self.region}.amazonaws.com"
            f"/{API_STAGE}/{API_GATEWAY_PATH}"
        )

    @property
    def token_url(self) -> str:
        return f"https://{self.cognito_host}/oauth2/token"

    @property
    def sign_in_url(self) -> str:
        params = urllib.parse.urlencode(
            {"client_id": self.client_id, "redirect_uri": self.redirect_url}
        )
        scope = urllib.parse.quote_plus(SIGN_IN_SCOPES)
        return (
            f"https://{self.cognito_host}/oauth2/authorize"
            f"?response_type=code&scope={scope}&{params}"
        )

    @property
    def authorization_token(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")
