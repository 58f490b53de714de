# fetch.py
import logging

import requests
from bs4 import BeautifulSoup

from .settings import DEFAULT_HEADERS, REQUEST_TIMEOUT

log = logging.getLogger(__name__)


class ScrapeError(Exception):
    pass


class FetchError(ScrapeError):
    pass


class ParseError(ScrapeError):
    pass


class ExtractionError(ScrapeError):
    pass


def build_session() -> requests.Session:
    # リトライはしない（失敗したURLはスキップする）
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session


def fetch_html(url: str, session: requests.Session) -> str:
    try:
        resp = session.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e
    log.debug("GET %s -> %s", url, resp.status_code)
    if not (200 <= resp.status_code < 300):
        raise FetchError(f"HTTP {resp.status_code} for {url}")
    # 文字化け対策
    if resp.encoding is None or resp.encoding.lower() in ("iso-8859-1", "latin-1"):
        resp.encoding = resp.apparent_encoding or "utf-8"
    return resp.text


def parse_html(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "lxml")
    if soup.find() is None:
        raise ParseError("Failed to parse HTML.")
    return soup
