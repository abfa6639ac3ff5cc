from __future__ import annotations

from typing import Dict, Optional, Sequence

# データ行インデックス(0 始まり) → シート行番号(1 始まり、1 行目はヘッダ)
HEADER_ROWS = 1


def normalize_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def can_edit_row(row: Sequence[str], email: Optional[str]) -> bool:
    """1 列目のメールアドレスが呼び出し元と一致する行だけ編集可"""
    owner = normalize_email(row[0]) if row else ""
    caller = normalize_email(email)
    return bool(owner) and owner == caller


def sheet_row_number(index: int) -> int:
    if index < 0:
        raise ValueError(f"row index must be >= 0, got {index}")
    return index + HEADER_ROWS + 1


def data_row_index(row_number: int) -> int:
    """sheet_row_number() の逆変換。ヘッダ行以前を指す場合は ValueError"""
    index = row_number - HEADER_ROWS - 1
    if index < 0:
        raise ValueError(f"row {row_number} is not a data row")
    return index


def row_to_record(headers: Sequence[str], row: Sequence[str]) -> Dict[str, str]:
    """編集フォーム用にヘッダ名 → 値の dict を作る。足りないセルは空文字。"""
    return {header: (row[i] if i < len(row) else "") for i, header in enumerate(headers)}
