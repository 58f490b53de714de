# fetch_urls.py
"""
所在地・電話番号の一覧ページから各裁判所ページのURLを集める
"""

import logging
from typing import List, Optional, Sequence
from urllib.parse import urljoin

import requests

from .fetch import build_session, fetch_html, parse_html
from .settings import SEED_LINK_PATTERNS, SEED_URL, SITE_ROOT, SOURCE_URLS

log = logging.getLogger(__name__)


def absolutize(href: str, base: str = SEED_URL) -> str:
    # "./../../tokyo/syozai/index.html" -> SITE_ROOT + "tokyo/syozai/index.html"
    if href.startswith("./../../"):
        return SITE_ROOT + href[len("./../../"):]
    return urljoin(base, href)


def get_base_urls(
    session: Optional[requests.Session] = None,
    seed_url: str = SEED_URL,
    patterns: Sequence[str] = SEED_LINK_PATTERNS,
) -> List[str]:
    # ここでの失敗は全体を中断させる（辿るURLが無い）
    session = session or build_session()
    soup = parse_html(fetch_html(seed_url, session))
    hrefs = [a.get("href") for a in soup.find_all("a", href=True)]
    urls = [
        absolutize(href, seed_url)
        for href in hrefs
        if any(p in href for p in patterns)
    ]
    # ユニーク化
    urls = list(dict.fromkeys(urls))
    log.info("一覧ページから %d 件のURLを取得: %s", len(urls), seed_url)
    return urls


def source_urls(session: Optional[requests.Session] = None) -> List[str]:
    if SOURCE_URLS:
        return list(SOURCE_URLS)
    return get_base_urls(session)
