# core/sheet_editor/__init__.py

"""
Sheet Row Editor Proxy core package.

- config.py    : ProxyConfig（起動時に一度だけ組み立てる設定）
- errors.py    : エラー分類（HTTP ステータス付き）
- models.py    : Pydantic モデル定義
- csv_parser.py: CSV エクスポートの簡易トークナイザ
- ownership.py : 行の所有者判定・行番号変換
- identity.py  : Bearer トークン検証
- service.py   : メイン処理（認証 + read / update の振り分け）
"""
