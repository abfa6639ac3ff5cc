from __future__ import annotations


class SheetProxyError(Exception):
    """プロキシが呼び出し元に {"error": ...} として返すエラーの基底クラス"""

    status_code: int = 500
    default_message: str = "Unknown error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(SheetProxyError):
    status_code = 401
    default_message = "No authorization header"


class Unauthorized(SheetProxyError):
    status_code = 401
    default_message = "Unauthorized"


class ValidationError(SheetProxyError):
    status_code = 400
    default_message = "Missing row or data"


class ConfigError(SheetProxyError):
    status_code = 500
    default_message = "Apps Script URL not configured"


class FetchError(SheetProxyError):
    status_code = 500
    default_message = "Failed to fetch spreadsheet data"


class UpdateError(SheetProxyError):
    status_code = 400
    default_message = "Update failed"


class InvalidAction(SheetProxyError):
    status_code = 400
    default_message = "Invalid action"


class InternalError(SheetProxyError):
    status_code = 500
    default_message = "Unknown error"
