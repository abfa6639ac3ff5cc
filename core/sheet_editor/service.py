from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from .config import ProxyConfig
from .csv_parser import parse_csv
from .errors import (
    ConfigError,
    FetchError,
    InternalError,
    InvalidAction,
    SheetProxyError,
    UpdateError,
    ValidationError,
)
from .identity import authenticate
from .models import (
    Identity,
    ReadResponse,
    SheetData,
    SheetRequest,
    UpdateResponse,
    WebhookResult,
    WebhookUpdate,
)
from .ownership import can_edit_row, data_row_index, normalize_email

logger = logging.getLogger(__name__)

NOT_OWNER_MESSAGE = "Row is not owned by the caller"


# ---------------------------------------------------------------------------
# read: CSV エクスポートの取得
# ---------------------------------------------------------------------------


def _fetch_rows(config: ProxyConfig, http: Any) -> List[List[str]]:
    """公開 CSV エクスポートを取得してパースする（呼び出し元の認証情報は使わない）"""
    url = config.export_url
    if not url:
        raise ConfigError("Sheet ID not configured")

    try:
        resp = http.get(url, timeout=config.request_timeout)
    except requests.RequestException as exc:
        raise FetchError() from exc

    if not resp.ok:
        logger.error("Sheet export returned %s", resp.status_code)
        raise FetchError()

    rows = parse_csv(resp.text)
    logger.info("Fetched rows: %d", len(rows))
    return rows


def read_sheet(identity: Identity, config: ProxyConfig, http: Any = requests) -> ReadResponse:
    return ReadResponse(data=_fetch_rows(config, http), userEmail=identity.email)


# ---------------------------------------------------------------------------
# update: Apps Script への転送
# ---------------------------------------------------------------------------


def _check_ownership(
    row: int,
    data: Dict[str, str],
    identity: Identity,
    config: ProxyConfig,
    http: Any,
) -> None:
    """enforce_row_ownership=True のときだけ、転送前にプロキシ側でも所有者を確認する"""
    sheet = SheetData.from_rows(_fetch_rows(config, http))

    for key in data:
        if key not in sheet.headers:
            raise ValidationError(f"Unknown column: {key}")

    try:
        index = data_row_index(row)
    except ValueError as exc:
        raise UpdateError(NOT_OWNER_MESSAGE) from exc

    if index >= len(sheet.rows) or not can_edit_row(sheet.rows[index], identity.email):
        raise UpdateError(NOT_OWNER_MESSAGE)

    # メール列そのものを書き換えて他人の行にすることも禁止
    email_column = sheet.headers[0] if sheet.headers else None
    if email_column in data and normalize_email(data[email_column]) != normalize_email(identity.email):
        raise UpdateError(NOT_OWNER_MESSAGE)


def update_row(
    request: SheetRequest,
    identity: Identity,
    config: ProxyConfig,
    http: Any = requests,
) -> UpdateResponse:
    """行の更新を Apps Script に転送する

    行の所有者チェックは基本的に Apps Script 側の責務で、ここでは
    userEmail を添えて渡すだけ（enforce_row_ownership=True の場合を除く）。
    """
    if not request.row or not request.data:
        raise ValidationError("Missing row or data")

    if not config.apps_script_url:
        raise ConfigError("Apps Script URL not configured")

    if config.enforce_row_ownership:
        _check_ownership(request.row, request.data, identity, config, http)

    payload = WebhookUpdate(row=request.row, data=request.data, userEmail=identity.email)
    resp = http.post(
        config.apps_script_url,
        json=payload.model_dump(),
        timeout=config.request_timeout,
    )

    result = WebhookResult.from_reply(resp.json())
    logger.info("Apps Script response: %s", result.model_dump())

    if not result.ok:
        raise UpdateError(result.error_message)

    return UpdateResponse()


# ---------------------------------------------------------------------------
# API エントリーポイント
# ---------------------------------------------------------------------------


def _parse_body(body: Any) -> SheetRequest:
    try:
        return SheetRequest.model_validate(body)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid request body") from exc


def process_request(
    body: Any,
    authorization: Optional[str],
    config: ProxyConfig,
    http: Any = requests,
) -> Dict[str, Any]:
    """プロキシのメイン処理

    1) Authorization ヘッダの検証
    2) ボディの検証
    3) action で read / update に振り分け

    失敗はすべて SheetProxyError として送出する。想定外の例外は
    InternalError に包み直す。
    """
    try:
        identity = authenticate(authorization, config, http=http)

        request = _parse_body(body)
        logger.info("Action: %s Row: %s", request.action, request.row)

        if request.action == "read":
            return read_sheet(identity, config, http=http).model_dump()

        if request.action == "update":
            return update_row(request, identity, config, http=http).model_dump()

        raise InvalidAction()

    except SheetProxyError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error: %s", exc)
        raise InternalError(str(exc) or None) from exc
