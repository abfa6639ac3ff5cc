from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .config import ProxyConfig
from .errors import ConfigError, Unauthenticated, Unauthorized
from .models import Identity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Authorization ヘッダからトークン部分を取り出す

    ヘッダ自体が無い場合のみ Unauthenticated。"Bearer " が付いていない値は
    そのままトークンとして扱い、検証は ID プロバイダ側に任せる。
    """
    if not authorization:
        raise Unauthenticated()
    return authorization.replace(BEARER_PREFIX, "", 1).strip()


def verify_token(token: str, config: ProxyConfig, http: Any = requests) -> Identity:
    """Supabase Auth (/auth/v1/user) でトークンを検証し Identity を返す"""
    if not config.supabase_url or not config.supabase_service_key:
        raise ConfigError("Identity provider not configured")

    url = f"{config.supabase_url.rstrip('/')}/auth/v1/user"
    headers = {
        "apikey": config.supabase_service_key,
        "Authorization": f"{BEARER_PREFIX}{token}",
    }

    try:
        resp = http.get(url, headers=headers, timeout=config.request_timeout)
    except requests.RequestException as exc:
        logger.warning("Auth error: %s", exc)
        raise Unauthorized() from exc

    if resp.status_code != 200:
        logger.warning("Auth error: identity provider returned %s", resp.status_code)
        raise Unauthorized()

    try:
        user = resp.json()
    except ValueError as exc:
        logger.warning("Auth error: identity provider returned non-JSON body")
        raise Unauthorized() from exc

    email = user.get("email") if isinstance(user, dict) else None
    if not email:
        logger.warning("Auth error: user has no email")
        raise Unauthorized()

    return Identity(email=email, user_id=user.get("id"))


def authenticate(authorization: Optional[str], config: ProxyConfig, http: Any = requests) -> Identity:
    token = extract_bearer_token(authorization)
    identity = verify_token(token, config, http=http)
    logger.info("Authenticated user: %s", identity.email)
    return identity
