from __future__ import annotations

from typing import List


def _normalize_line_endings(text: str) -> str:
    """CRLF / CR を LF に揃える（Google のエクスポートは CRLF で返ってくる）"""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _parse_line(line: str) -> List[str]:
    """1 行分をフィールドに分解する。

    - " はクォートモードを切り替える（クォート中の "" はリテラルの " 1 文字）
    - クォート外の , はフィールド区切り、クォート中の , は値の一部
    - 行末で閉じていないクォートはそのまま行末で閉じたものとして扱う
    """
    values: List[str] = []
    current: List[str] = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]

        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current))
            current = []
        else:
            current.append(char)

        i += 1

    values.append("".join(current))
    return values


def parse_csv(text: str) -> List[List[str]]:
    """CSV テキストを 2 次元配列に変換する

    空白のみの行は行そのものを出力しない。I/O なし・状態なしの純粋関数で、
    どんな文字列を渡しても例外は出さない。
    """
    rows: List[List[str]] = []
    for line in _normalize_line_endings(text).split("\n"):
        if not line.strip():
            continue
        rows.append(_parse_line(line))
    return rows
