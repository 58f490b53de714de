# names.py
"""
裁判所名の分割・正規化・絞り込み・並べ替え

- 「東京地方裁判所東京家庭裁判所」のように連結された名称を「裁判所」で区切る
- 支部・出張所・中黒の直後で改行を入れて行単位に分ける
- 句読点や空白を取り除いた最終形を重複なしで並べる
"""

import re
from typing import Iterable, List, Sequence

TERMINATOR = "裁判所"
BRANCH = "支部"
SUB_OFFICE = "出張所"
MIDDLE_DOT = "・"

DEFAULT_SUFFIXES = (TERMINATOR, BRANCH)

# 構内の部署案内など、名称ではないリンク
PREMISES_MARKER = "内の"

_BREAK_AFTER_RE = re.compile(
    "(" + "|".join(map(re.escape, (BRANCH, SUB_OFFICE, MIDDLE_DOT))) + ")"
)
_DECORATION_RE = re.compile(r"[，．･・\s]+")


def is_candidate(text: str, suffixes: Sequence[str] = DEFAULT_SUFFIXES) -> bool:
    if not text.endswith(tuple(suffixes)):
        return False
    return PREMISES_MARKER not in text and "/" not in text


def split_lines(text: str) -> List[str]:
    """
    支部・出張所・「・」の直後を改行にして分割する（区切り文字自体は残す）
    """
    expanded = _BREAK_AFTER_RE.sub(r"\1\n", text)
    lines = [line.strip() for line in expanded.split("\n")]
    return [line for line in lines if line]


def tokenize(text: str) -> List[str]:
    """
    連結された名称を「裁判所」の直後で区切る。

    区切りを連結すると元の文字列に戻る。「裁判所」が 1 回以下しか
    現れない場合は分割せず、元の文字列だけを返す。
    """
    if text.count(TERMINATOR) < 2:
        return [text]

    tokens: List[str] = []
    cursor = 0
    while cursor < len(text):
        pos = text.find(TERMINATOR, cursor)
        if pos == -1:
            tokens.append(text[cursor:])
            break
        end = pos + len(TERMINATOR)
        tokens.append(text[cursor:end])
        cursor = end
    return tokens


def clean_name(text: str) -> str:
    return _DECORATION_RE.sub("", text.strip())


def sort_names(names: Iterable[str]) -> List[str]:
    # 辞書順に並べたあと長さで安定ソート（同じ長さなら辞書順のまま）
    alphabetical = sorted(set(names))
    return sorted(alphabetical, key=len)


def canonical_names(
    candidates: Iterable[str], suffixes: Sequence[str] = DEFAULT_SUFFIXES
) -> List[str]:
    names: List[str] = []
    for candidate in candidates:
        if not is_candidate(candidate, suffixes):
            continue
        for line in split_lines(candidate):
            for token in tokenize(line):
                name = clean_name(token)
                if name:
                    names.append(name)
    return sort_names(names)
