from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel

DEFAULT_EXPORT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class ProxyConfig(BaseModel):
    """
    プロキシの設定値。

    プロセス起動時に一度だけ組み立て、create_app() / process_request() に渡す。
    ロジック側で環境変数を直接読むことはしない。
    """

    # 読み取り対象のスプレッドシート
    sheet_id: Optional[str] = None
    export_url_template: str = DEFAULT_EXPORT_URL_TEMPLATE

    # 書き込み用 Apps Script Web アプリ
    apps_script_url: Optional[str] = None

    # 認証（Supabase Auth）
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    # 外部呼び出しのタイムアウト（秒）
    request_timeout: float = 30.0

    # True の場合、update 転送前に行の所有者と列名をプロキシ側でも検証する
    enforce_row_ownership: bool = False

    @property
    def export_url(self) -> Optional[str]:
        if not self.sheet_id:
            return None
        return self.export_url_template.format(sheet_id=self.sheet_id)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProxyConfig":
        env = os.environ if environ is None else environ
        return cls(
            sheet_id=env.get("GOOGLE_SHEET_ID") or None,
            export_url_template=env.get("GOOGLE_SHEET_EXPORT_URL") or DEFAULT_EXPORT_URL_TEMPLATE,
            apps_script_url=env.get("GOOGLE_APPS_SCRIPT_URL") or None,
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_service_key=env.get("SUPABASE_SERVICE_ROLE_KEY") or None,
            request_timeout=float(env.get("SHEET_PROXY_TIMEOUT", "30")),
            enforce_row_ownership=_env_flag(env.get("SHEET_PROXY_ENFORCE_OWNERSHIP")),
        )
