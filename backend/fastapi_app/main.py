from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

# ============================================================
# プロジェクトルートを sys.path に追加
# （Lambda / uvicorn どちらでも core パッケージを解決できるように）
# ============================================================
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from core.sheet_editor.config import ProxyConfig  # noqa: E402
from core.sheet_editor.errors import SheetProxyError  # noqa: E402
from core.sheet_editor.models import ErrorResponse  # noqa: E402
from core.sheet_editor.service import process_request  # noqa: E402

VERSION = "0.1.0"

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# プリフライトを含むすべてのレスポンスに付与する
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def create_app(config: Optional[ProxyConfig] = None, http: Any = None) -> FastAPI:
    """
    FastAPI アプリを生成する。

    config 未指定時は環境変数から一度だけ組み立てる。
    http は外部呼び出しに使うモジュール/オブジェクト（テストで差し替え用）。
    """
    app = FastAPI(
        title="Sheet Row Editor Proxy",
        version=VERSION,
        description="Authenticated read / per-row update proxy for a shared spreadsheet",
    )
    app.state.config = config or ProxyConfig.from_env()
    app.state.http = http

    @app.exception_handler(SheetProxyError)
    async def sheet_proxy_error_handler(_: Request, exc: SheetProxyError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump(),
            headers=CORS_HEADERS,
        )

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(content={"status": "ok", "version": VERSION}, headers=CORS_HEADERS)

    # NOTE:
    # プリフライトは認証より前に空の 200 で返す
    @app.options("/v0/sheet")
    async def sheet_preflight() -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.post("/v0/sheet")
    async def sheet_endpoint(request: Request) -> JSONResponse:
        authorization = request.headers.get("authorization")
        try:
            body = await request.json()
        except ValueError:
            body = None

        kwargs = {}
        if request.app.state.http is not None:
            kwargs["http"] = request.app.state.http

        # requests による外部呼び出しはブロッキングなのでスレッドプールで実行
        result = await run_in_threadpool(
            process_request,
            body,
            authorization,
            request.app.state.config,
            **kwargs,
        )
        return JSONResponse(content=result, headers=CORS_HEADERS)

    return app


app = create_app()
