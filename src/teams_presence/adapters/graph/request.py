from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx

from teams_presence.domain.errors import RequestConstructionError

PROXY_URL = "https://graph.office.net/en-us/graph/api/proxy"
PRESENCE_URL_TEMPLATE = "https://graph.microsoft.com/beta/users/{identifier}/presence"

# Substituted with a real bearer token by the Graph Explorer proxy session.
PLACEHOLDER_TOKEN = "{token:https://graph.microsoft.com/}"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0.5790.171 Safari/537.36"
)


def presence_url(identifier: str) -> str:
    inner = PRESENCE_URL_TEMPLATE.format(identifier=identifier)
    return f"{PROXY_URL}?url={quote(inner, safe='')}"


def build_presence_request(
    identifier: str,
    auth_token: str = PLACEHOLDER_TOKEN,
    timeout: Optional[httpx.Timeout] = None,
) -> httpx.Request:
    extensions = {"timeout": timeout.as_dict()} if timeout is not None else {}
    try:
        return httpx.Request(
            "GET",
            presence_url(identifier),
            headers={
                "User-Agent": USER_AGENT,
                "Authorization": f"Bearer {auth_token}",
                "Accept": "*/*",
            },
            extensions=extensions,
        )
    except (httpx.InvalidURL, ValueError) as e:
        raise RequestConstructionError(identifier, f"Could not build presence request: {e}") from e
