from __future__ import annotations
import logging
import re
import urllib.parse
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from ..errors import MissingCallback, VerificationTransportError

logger = logging.getLogger(__name__)

STEAM_OPENID_ENDPOINT = "https://steamcommunity.com/openid/login"
OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"

IDENTIFIER_PATTERN = re.compile(r"^https?://steamcommunity\.com/openid/id/(\d+)$")
IS_VALID_PATTERN = re.compile(r"is_valid\s*:\s*true", re.IGNORECASE)


def origin_of(url: str) -> str:
    parsed = urllib.parse.urlsplit(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class AuthorizationRequest(BaseModel):
    """Parameters of an OpenID 2.0 ``checkid_setup`` request in identifier-select mode.

    https://openid.net/specs/openid-authentication-2_0.html#requesting_authentication
    """

    model_config = ConfigDict(frozen=True)

    endpoint_url: str = STEAM_OPENID_ENDPOINT
    mode: str = "checkid_setup"
    ns: str = OPENID_NS
    identity: str = IDENTIFIER_SELECT
    claimed_id: str = IDENTIFIER_SELECT
    return_to: str
    realm: str

    @property
    def params(self) -> Dict[str, str]:
        return {
            "openid.mode": self.mode,
            "openid.ns": self.ns,
            "openid.identity": self.identity,
            "openid.claimed_id": self.claimed_id,
            "openid.return_to": self.return_to,
            "openid.realm": self.realm,
        }

    @property
    def redirect_url(self) -> str:
        return f"{self.endpoint_url}?{urllib.parse.urlencode(self.params)}"


def build_authorization_request(return_to: str, realm: str) -> AuthorizationRequest:
    return AuthorizationRequest(return_to=return_to, realm=realm)


def build_openid_redirect(return_to: str, realm: Optional[str] = None) -> str:
    return build_authorization_request(return_to, realm or origin_of(return_to)).redirect_url


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    claimed_id: Optional[str] = None
    steam_id: Optional[str] = None


def signed_fields(params: httpx.QueryParams) -> List[str]:
    signed = params.get("openid.signed") or ""
    return [name for name in signed.split(",") if name]


def build_verification_params(params: httpx.QueryParams) -> Dict[str, str]:
    """Build the ``check_authentication`` form from the assertion's query parameters.

    Every field named in ``openid.signed`` is echoed back, as an empty string
    when the callback does not carry it: the signature covers the exact set. The protocol fields are
    written last so a signed ``mode`` or ``ns`` cannot replace them.
    """
    echoed = {f"openid.{name}": params.get(f"openid.{name}") or "" for name in signed_fields(params)}
    return {
        **echoed,
        "openid.assoc_handle": params.get("openid.assoc_handle") or "",
        "openid.signed": params.get("openid.signed") or "",
        "openid.sig": params.get("openid.sig") or "",
        "openid.ns": OPENID_NS,
        "openid.mode": "check_authentication",
    }


def extract_steam_id(claimed_id: Optional[str]) -> Optional[str]:
    if not claimed_id:
        return None
    match = IDENTIFIER_PATTERN.match(claimed_id)
    return match.group(1) if match else None


class AssertionVerifier:
    """Verifies a positive assertion by asking Steam directly.

    https://openid.net/specs/openid-authentication-2_0.html#verifying_signatures
    """

    def __init__(self, endpoint: str = STEAM_OPENID_ENDPOINT, timeout: float = 10.0):
        self.endpoint = endpoint
        self.timeout = timeout

    async def _post(self, form: Dict[str, str]) -> httpx.Response:
        body = urllib.parse.urlencode(form)
        headers = {
            "Accept-Language": "en",
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": str(len(body.encode())),
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.endpoint, content=body.encode(), headers=headers)
        except httpx.HTTPError as exc:
            raise VerificationTransportError(f"check_authentication request failed: {exc}") from exc
        return resp

    async def check(self, callback_url: Optional[str]) -> VerificationResult:
        if not callback_url:
            raise MissingCallback("No callback URL to verify")

        params = httpx.URL(callback_url).params
        form = build_verification_params(params)
        resp = await self._post(form)
        if resp.is_error:
            logger.warning("check_authentication returned HTTP %s", resp.status_code)

        claimed_id = form.get("openid.claimed_id")
        if not IS_VALID_PATTERN.search(resp.text):
            logger.info("Steam rejected assertion for %s", claimed_id)
            logger.debug("check_authentication response: %r", resp.text)
            return VerificationResult(is_valid=False, claimed_id=claimed_id)

        steam_id = extract_steam_id(claimed_id)
        if steam_id is None:
            logger.warning("Valid assertion with unexpected claimed_id %r", claimed_id)
        return VerificationResult(is_valid=True, claimed_id=claimed_id, steam_id=steam_id)

    async def verify(self, callback_url: Optional[str]) -> Optional[str]:
        result = await self.check(callback_url)
        return result.steam_id
