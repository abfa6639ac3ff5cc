from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .ownership import can_edit_row

Row = List[str]


class SheetRequest(BaseModel):
    """
    プロキシへのリクエストボディ

    action は "read" / "update" を想定するが、それ以外の値も受け取り
    service 側で InvalidAction として扱う（422 ではなく 400 を返すため）。
    row は Apps Script 側の 1 始まりの行番号（ヘッダが 1 行目）。
    """

    action: Optional[str] = None
    row: Optional[int] = None
    data: Optional[Dict[str, str]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "update",
                "row": 2,
                "data": {"Email": "alice@example.com", "Status": "done"},
            }
        }
    )


class Identity(BaseModel):
    """検証済みトークンから得た呼び出し元。リクエスト中は変更しない。"""

    model_config = ConfigDict(frozen=True)

    email: str
    user_id: Optional[str] = None


class ReadResponse(BaseModel):
    data: List[Row] = Field(default_factory=list)
    userEmail: str


class UpdateResponse(BaseModel):
    success: Literal[True] = True


class ErrorResponse(BaseModel):
    error: str


class WebhookUpdate(BaseModel):
    """Apps Script に転送する update ペイロード"""

    action: Literal["update"] = "update"
    row: int
    data: Dict[str, str]
    userEmail: str


class WebhookResult(BaseModel):
    """
    Apps Script の返却値。

    型は緩く受け取る（success が null、error が数値や dict でも
    「失敗」として扱えるように）。
    """

    success: Any = False
    error: Any = None

    @classmethod
    def from_reply(cls, reply: Any) -> "WebhookResult":
        if not isinstance(reply, dict):
            return cls()
        return cls(success=reply.get("success"), error=reply.get("error"))

    @property
    def ok(self) -> bool:
        return bool(self.success)

    @property
    def error_message(self) -> Optional[str]:
        err = self.error
        if isinstance(err, dict) and err.get("message"):
            err = err["message"]
        return str(err) if err else None


class SheetData(BaseModel):
    """read 結果をヘッダ行とデータ行に分けたもの"""

    headers: Row = Field(default_factory=list)
    rows: List[Row] = Field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: List[Row]) -> "SheetData":
        if not rows:
            return cls()
        return cls(headers=rows[0], rows=rows[1:])

    def editable_rows(self, email: str) -> List[int]:
        """呼び出し元が編集できるデータ行の 0 始まりインデックス"""
        return [i for i, row in enumerate(self.rows) if can_edit_row(row, email)]
