"""OpenID 2.0 message helpers for Steam sign-in.

Steam acts as an OpenID 2.0 provider with identifier select: the site
sends the browser to Steam, and Steam redirects back with a positive
assertion whose claimed id ends in the user's 64-bit SteamID. The
assertion is then confirmed with a direct ``check_authentication``
request to Steam (stateless mode).
"""

import re
from collections.abc import Mapping
from urllib.parse import urlencode, urlsplit

OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"

CLAIMED_ID_PATTERN = re.compile(r"^https?://steamcommunity\.com/openid/id/(\d{17})$")

# Fields a positive assertion must sign (OpenID 2.0, section 10.1)
REQUIRED_SIGNED_FIELDS = frozenset(
    {"op_endpoint", "return_to", "response_nonce", "assoc_handle", "claimed_id", "identity"}
)


class OpenIDMessageError(ValueError):
    """Callback parameters do not form a usable positive assertion."""

    pass


def build_login_url(endpoint: str, return_url: str, realm: str) -> str:
    """Build the checkid_setup redirect URL.

    Args:
        endpoint: Steam OpenID endpoint
        return_url: Callback address registered for this site
        realm: Site identity shown on the Steam login page

    Returns:
        URL to redirect the browser to
    """
    params = {
        "openid.ns": OPENID_NS,
        "openid.mode": "checkid_setup",
        "openid.return_to": return_url,
        "openid.realm": realm,
        "openid.identity": IDENTIFIER_SELECT,
        "openid.claimed_id": IDENTIFIER_SELECT,
    }
    return f"{endpoint}?{urlencode(params)}"


def extract_steam_id(
    params: Mapping[str, str], endpoint: str, return_url: str
) -> str:
    """Validate a positive assertion and extract the SteamID it claims.

    Only structural checks happen here. The signature is confirmed by
    Steam through ``check_authentication``.

    Args:
        params: Callback query parameters
        endpoint: Expected Steam OpenID endpoint
        return_url: Callback address this site registered

    Returns:
        64-bit SteamID as decimal text

    Raises:
        OpenIDMessageError: If the assertion is cancelled, malformed or
            was issued for another endpoint or return address
    """
    mode = params.get("openid.mode")
    if mode == "cancel":
        raise OpenIDMessageError("Login was cancelled at Steam")
    if mode == "error":
        raise OpenIDMessageError(
            f"Steam returned an error: {params.get('openid.error', 'unknown')}"
        )
    if mode != "id_res":
        raise OpenIDMessageError(f"Unexpected openid.mode: {mode!r}")

    if params.get("openid.ns") != OPENID_NS:
        raise OpenIDMessageError("Unsupported OpenID namespace")

    if params.get("openid.op_endpoint") != endpoint:
        raise OpenIDMessageError("Assertion was issued by an unexpected endpoint")

    if not _same_address(params.get("openid.return_to", ""), return_url):
        raise OpenIDMessageError("Assertion return_to does not match this site")

    signed = set(params.get("openid.signed", "").split(","))
    missing = REQUIRED_SIGNED_FIELDS - signed
    if missing:
        raise OpenIDMessageError(f"Assertion does not sign {sorted(missing)}")

    claimed_id = params.get("openid.claimed_id", "")
    if claimed_id != params.get("openid.identity"):
        raise OpenIDMessageError("Claimed id and identity differ")

    match = CLAIMED_ID_PATTERN.match(claimed_id)
    if not match:
        raise OpenIDMessageError("Claimed id is not a Steam community id")

    return match.group(1)


def check_authentication_params(params: Mapping[str, str]) -> dict[str, str]:
    """Copy the assertion for direct verification with Steam."""
    body = {k: v for k, v in params.items() if k.startswith("openid.")}
    body["openid.mode"] = "check_authentication"
    return body


def parse_key_value(body: str) -> dict[str, str]:
    """Parse an OpenID key-value form response ("key:value" per line)."""
    result: dict[str, str] = {}
    for line in body.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            result[key.strip()] = value.strip()
    return result


def _same_address(url: str, expected: str) -> bool:
    """Compare scheme, host and path, ignoring any query string."""
    actual = urlsplit(url)
    wanted = urlsplit(expected)
    return (actual.scheme, actual.netloc, actual.path) == (
        wanted.scheme,
        wanted.netloc,
        wanted.path,
    )
