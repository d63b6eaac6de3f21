# cognito_callback.py
import json
import logging
import urllib.parse
from dataclasses import asdict, dataclass
from typing import Optional

from cognito_config import CognitoConfig
from token_client import Transport, TransportError, UrllibTransport

logger = logging.getLogger()
logger.setLevel(logging.INFO)

TOKEN_TIMEOUT_SECONDS = 30


class TokenExchangeError(Exception):
    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message


@dataclass
class TokenResponse:
    id_token: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_in: int = 0
    token_type: str = ""

    @classmethod
    def from_json(cls, raw):
        """
        Decode Cognito's token payload.

        Unknown keys are dropped and missing/null keys keep their zero value,
        but a key present with the wrong JSON type is rejected. A bare `null`
        payload decodes to all zero values.
        """
        data = json.loads(raw)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        fields = {}
        for name, default in asdict(cls()).items():
            value = data.get(name)
            if value is None:
                continue
            if isinstance(default, int):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"field {name} must be an integer")
            elif not isinstance(value, str):
                raise ValueError(f"field {name} must be a string")
            fields[name] = value
        return cls(**fields)

    def to_json(self):
        return _dumps(asdict(self))


def _dumps(obj):
    return json.dumps(obj, separators=(",", ":"))


def _resp(status, body):
    return {
        "statusCode": status,
        "headers": {
            "Content-Type": "application/json",
            "Cache-Control": "no-store",
        },
        "body": body,
    }


def error_response(status, message):
    return _resp(status, _dumps({"status": "error", "message-error": str(message)}))


def sign_up_response(config):
    message = f"Please, access the link and proceed with the sign-in: [{config.sign_in_url}]"
    return _resp(200, _dumps({"status": "ok", "message": message}))


def _query_code(event):
    qs = (event or {}).get("queryStringParameters") or {}
    return qs.get("code") or ""


def _request_tokens(code, config, transport):
    form = urllib.parse.urlencode({
        "grant_type": "authorization_code",
        "client_id": config.client_id,
        "code": code,
        "redirect_uri": config.redirect_url,
    }).encode("utf-8")

    headers = {
        "Authorization": f"Basic {config.authorization_token}",
        "Content-Type": "application/x-www-form-urlencoded",
        "Content-Length": str(len(form)),
    }

    try:
        r = transport.post(config.token_url, form, headers, TOKEN_TIMEOUT_SECONDS)
    except TransportError as e:
        raise TokenExchangeError(500, str(e)) from e

    logger.info("Token endpoint answered with status %s", r.status)

    if r.status != 200:
        raise TokenExchangeError(r.status, r.text)

    try:
        return TokenResponse.from_json(r.body)
    except (ValueError, UnicodeDecodeError) as e:
        raise TokenExchangeError(500, str(e)) from e


def exchange_code(
    code: str,
    config: Optional[CognitoConfig] = None,
    transport: Optional[Transport] = None,
) -> dict:
    """
    Trade an authorization code for Cognito tokens.

    Always returns an API Gateway response. Any failure along the way is
    logged and turned into an error body; the status is the provider's when
    it rejected the request, 500 otherwise.
    """
    if config is None:
        config = CognitoConfig.from_env()
    if transport is None:
        transport = UrllibTransport()

    try:
        tokens = _request_tokens(code, config, transport)
    except TokenExchangeError as e:
        logger.error("Token exchange failed (%s): %s", e.status, e.message)
        return error_response(e.status, e.message)

    return _resp(200, tokens.to_json())


def handle(
    event: dict,
    config: Optional[CognitoConfig] = None,
    transport: Optional[Transport] = None,
) -> dict:
    if config is None:
        config = CognitoConfig.from_env()

    code = _query_code(event)
    if not code:
        logger.info("No authorization code in request; returning sign-in link")
        return sign_up_response(config)

    logger.info("Authorization code received; exchanging for tokens")
    return exchange_code(code, config, transport)


def handler(event, context):
    return handle(event)
