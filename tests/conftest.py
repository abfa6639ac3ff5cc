import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# tests/ から見て 1 つ上 = プロジェクトルート
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# プロジェクトルートを sys.path の先頭に追加
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from core.sheet_editor.config import ProxyConfig  # noqa: E402

SUPABASE_URL = "https://project.supabase.co"
APPS_SCRIPT_URL = "https://script.google.com/macros/s/abc/exec"
SHEET_CSV = (
    "Email,Name,Status\r\n"
    "alice@example.com,Alice,todo\r\n"
    '"Bob@Example.com ","Bob, Jr.","said ""hi"""\r\n'
)


def make_response(status_code=200, json_body=None, text=""):
    """requests.Response 相当のモック"""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.text = text
    resp.json.return_value = json_body
    return resp


@pytest.fixture
def proxy_config() -> ProxyConfig:
    return ProxyConfig(
        sheet_id="sheet123",
        apps_script_url=APPS_SCRIPT_URL,
        supabase_url=SUPABASE_URL,
        supabase_service_key="service-key",
        request_timeout=5,
    )


@pytest.fixture
def http() -> Mock:
    """
    外部呼び出し（requests モジュール相当）のモック。

    - GET /auth/v1/user      : alice@example.com として認証成功
    - GET シートのエクスポート: SHEET_CSV
    - POST Apps Script       : success=True
    """
    mock = Mock()

    def _get(url, **kwargs):
        if url.endswith("/auth/v1/user"):
            return make_response(200, {"id": "u-1", "email": "alice@example.com"})
        return make_response(200, text=SHEET_CSV)

    mock.get.side_effect = _get
    mock.post.return_value = make_response(200, {"success": True})
    return mock
