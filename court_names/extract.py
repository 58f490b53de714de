# extract.py
"""
ページごとのレイアウトに合わせて名称候補を取り出す

- anchor_title_or_text: a タグの title 属性（無ければ表示テキスト）
- anchor_text: a タグの表示テキスト
- table_cell: 表の 1 列目（「地図」などの注記は削る）。住所・電話番号も取れる
"""

import enum
import re
from typing import Dict, List, NamedTuple, Tuple

from bs4 import BeautifulSoup, Tag

from .fetch import ExtractionError
from .names import BRANCH, SUB_OFFICE, TERMINATOR, clean_name, is_candidate


class Strategy(enum.Enum):
    ANCHOR_TITLE_OR_TEXT = "anchor_title_or_text"
    ANCHOR_TEXT = "anchor_text"
    TABLE_CELL = "table_cell"


class SourceRule(NamedTuple):
    pattern: str
    strategy: Strategy
    suffixes: Tuple[str, ...]


TABLE_SUFFIXES = (TERMINATOR, BRANCH, SUB_OFFICE)

# 先にマッチしたものを使う
SOURCE_RULES: Tuple[SourceRule, ...] = (
    SourceRule("ip/info/access/", Strategy.TABLE_CELL, TABLE_SUFFIXES),
    SourceRule("ip/about/syozai/", Strategy.TABLE_CELL, TABLE_SUFFIXES),
    SourceRule("syozai/index.html", Strategy.ANCHOR_TITLE_OR_TEXT, (TERMINATOR, BRANCH)),
)
DEFAULT_RULE = SourceRule("", Strategy.ANCHOR_TEXT, (TERMINATOR, BRANCH))

ROW_SELECTOR = "table tr:has(td)"
MAP_NOTE_RE = re.compile(r"\s*(地図|MAP|Map|map).*$", re.DOTALL)
PHONE_RE = re.compile(r"0\d{1,4}-\d{1,4}-\d{3,4}")
RECORD_CELLS = 3


def rule_for_url(url: str) -> SourceRule:
    for rule in SOURCE_RULES:
        if rule.pattern in url:
            return rule
    return DEFAULT_RULE


def normalize_space(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def strip_map_note(s: str) -> str:
    return MAP_NOTE_RE.sub("", s).strip()


def anchor_texts(soup: BeautifulSoup) -> List[str]:
    return [a.get_text().strip() for a in soup.find_all("a")]


def anchor_titles_or_texts(soup: BeautifulSoup) -> List[str]:
    out: List[str] = []
    for a in soup.find_all("a"):
        title = (a.get("title") or "").strip()
        out.append(title or a.get_text().strip())
    return out


def table_rows(soup: BeautifulSoup) -> List[List[Tag]]:
    return [tr.find_all(["td", "th"]) for tr in soup.select(ROW_SELECTOR)]


def first_cell_texts(soup: BeautifulSoup) -> List[str]:
    return [strip_map_note(cells[0].get_text(" ", strip=True)) for cells in table_rows(soup)]


def extract_candidates(soup: BeautifulSoup, strategy: Strategy) -> List[str]:
    if strategy is Strategy.ANCHOR_TITLE_OR_TEXT:
        return anchor_titles_or_texts(soup)
    if strategy is Strategy.ANCHOR_TEXT:
        return anchor_texts(soup)
    return first_cell_texts(soup)


def pick_phone(text: str) -> str:
    m = PHONE_RE.search(text)
    if m:
        return m.group(0)
    return text


def extract_records(
    soup: BeautifulSoup, suffixes: Tuple[str, ...] = TABLE_SUFFIXES
) -> List[Dict[str, str]]:
    """
    表の各行から {"court name", "place", "phone"} を作る。
    名称は分割せずに最終整形だけかける。
    """
    records: Dict[str, Dict[str, str]] = {}
    for cells in table_rows(soup):
        first = strip_map_note(cells[0].get_text(" ", strip=True))
        if not is_candidate(first, suffixes):
            continue
        if len(cells) < RECORD_CELLS:
            raise ExtractionError(
                f"row for {first!r} has {len(cells)} cell(s), expected {RECORD_CELLS}"
            )
        name = clean_name(first)
        if not name or name in records:
            continue
        place = normalize_space(strip_map_note(cells[1].get_text(" ", strip=True)))
        phone = pick_phone(normalize_space(cells[2].get_text(" ", strip=True)))
        records[name] = {"court name": name, "place": place, "phone": phone}
    return list(records.values())
