# scrape.py
"""
裁判所の所在地ページを順番に取得し、名称一覧をファイルに書き出す

- 入力: 所在地・電話番号の一覧ページから辿ったURL（settings.SOURCE_URLS があればそちら）
- 出力: URLごとの {timestamp}_{basename}.txt（表形式のページは .csv）と
        全URL分をまとめた {timestamp}_all_court_data.txt
- 1 URLずつ REQUEST_INTERVAL_SEC 秒空けて取得する。失敗したURLは飛ばして続行
"""

import functools
import logging
import time
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

import requests
from tqdm import tqdm

from .extract import Strategy, extract_candidates, extract_records, rule_for_url
from .fetch import build_session, fetch_html, parse_html
from .fetch_urls import source_urls
from .names import canonical_names, sort_names
from .output import (
    build_filename,
    free_filename,
    save_as_file,
    save_records_csv,
    source_basename,
    timestamp,
)
from .settings import COMBINED_BASENAME, OUTPUT_DIR, REQUEST_INTERVAL_SEC

log = logging.getLogger(__name__)


class SourceResult(NamedTuple):
    url: str
    names: List[str]
    records: Optional[List[Dict[str, str]]] = None


def scrape_page(url: str, session: requests.Session) -> SourceResult:
    log.info("%s からデータを取得中...", url)
    rule = rule_for_url(url)
    soup = parse_html(fetch_html(url, session))
    names = canonical_names(extract_candidates(soup, rule.strategy), rule.suffixes)
    records = None
    if rule.strategy is Strategy.TABLE_CELL:
        records = extract_records(soup, rule.suffixes)
    return SourceResult(url, names, records)


def scrape_pages(
    urls: List[str],
    delay_sec: float = REQUEST_INTERVAL_SEC,
    scrape_one: Optional[Callable[[str], SourceResult]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[SourceResult]:
    """
    URLを入力順に1件ずつ処理する。

    失敗したURLはログに残して結果に含めない。最後のURL以外は処理後に
    delay_sec 秒待つ。
    """
    if scrape_one is None:
        scrape_one = functools.partial(scrape_page, session=build_session())

    results: List[SourceResult] = []
    total = len(urls)
    for i, url in enumerate(tqdm(urls, desc="Scraping"), 1):
        try:
            results.append(scrape_one(url))
        except Exception as e:
            # ページごとの失敗は全体に影響させない
            log.error("Error in %s: %s", url, e)

        if i < total:
            log.info("[%3d/%3d] 次のリクエストまで %s 秒待機中...", i, total, delay_sec)
            sleep(delay_sec)
    return results


def combine(results: Iterable[SourceResult]) -> List[str]:
    return sort_names(name for result in results for name in result.names)


def save_results(results: List[SourceResult], out_dir: str) -> List[str]:
    paths: List[str] = []
    for result in results:
        basename = source_basename(result.url)
        if result.records is not None:
            filename = free_filename(build_filename(basename, "csv", timestamp()), out_dir)
            paths.append(save_records_csv(result.records, filename, out_dir))
        else:
            filename = free_filename(build_filename(basename, "txt", timestamp()), out_dir)
            paths.append(save_as_file(result.names, filename, out_dir))

    all_names = combine(results)
    if all_names:
        filename = free_filename(build_filename(COMBINED_BASENAME, "txt", timestamp()), out_dir)
        paths.append(save_as_file(all_names, filename, out_dir))
    else:
        log.warning("出力対象の名称がありません（全URLで取得できませんでした）")
    return paths


def run(
    urls: List[str],
    out_dir: str,
    delay_sec: float = REQUEST_INTERVAL_SEC,
    scrape_one: Optional[Callable[[str], SourceResult]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[str]:
    results = scrape_pages(urls, delay_sec, scrape_one, sleep)
    log.info("Processed %d URL(s), %d succeeded", len(urls), len(results))
    return save_results(results, out_dir)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    session = build_session()
    urls = source_urls(session)
    run(urls, OUTPUT_DIR, scrape_one=functools.partial(scrape_page, session=session))


if __name__ == "__main__":
    main()
