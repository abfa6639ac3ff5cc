from __future__ import annotations

import json
from typing import Any, Dict, Optional

from mangum import Mangum

from backend.fastapi_app.main import app


def _safe_get(d, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _stage_base_path(event) -> Optional[str]:
    """/dev や /prod のステージ名プレフィックス。$default ステージなら None"""
    stage = _safe_get(event, "requestContext", "stage", default=None)
    if stage and stage != "$default":
        return f"/{stage}"
    return None


def _request_summary(event) -> Dict[str, Any]:
    """CloudWatch 用の 1 行ログ。Authorization ヘッダは値を出さず有無だけ"""
    headers = _safe_get(event, "headers", default=None) or {}
    return {
        "diag": "incoming_request",
        "stage": _safe_get(event, "requestContext", "stage", default=None),
        "method": _safe_get(event, "requestContext", "http", "method", default=None),
        "path": event.get("rawPath"),
        "has_authorization": any(k.lower() == "authorization" for k in headers),
    }


def handler(event, context):
    print(json.dumps(_request_summary(event), ensure_ascii=False))

    asgi = Mangum(app, api_gateway_base_path=_stage_base_path(event))
    return asgi(event, context)
