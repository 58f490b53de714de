# tests/test_scrape.py
import datetime
import functools
import os
from unittest.mock import MagicMock

import pandas as pd
import pytest

from court_names import scrape
from court_names.fetch import FetchError
from court_names.output import (
    build_filename,
    free_filename,
    save_as_file,
    source_basename,
    timestamp,
)
from court_names.scrape import SourceResult, combine, run, scrape_page, scrape_pages

URLS = [
    "https://www.courts.go.jp/tokyo/syozai/index.html",
    "https://www.courts.go.jp/osaka/syozai/index.html",
    "https://www.courts.go.jp/nagoya/syozai/index.html",
]

PAGES = {
    URLS[0]: ["東京地方裁判所", "東京家庭裁判所"],
    URLS[2]: ["名古屋地方裁判所", "東京地方裁判所"],
}


def fake_scrape(url):
    if url not in PAGES:
        raise FetchError(f"HTTP 503 for {url}")
    return SourceResult(url, PAGES[url])


def test_scrape_pages_isolates_failures():
    sleeps = []
    results = scrape_pages(URLS, 3.0, fake_scrape, sleeps.append)
    assert [r.url for r in results] == [URLS[0], URLS[2]]
    # 最後のURLの後は待たない
    assert sleeps == [3.0, 3.0]


def test_scrape_pages_single_url_does_not_sleep():
    sleeps = []
    scrape_pages(URLS[:1], 3.0, fake_scrape, sleeps.append)
    assert sleeps == []


def test_combine_dedupes_across_sources():
    results = [fake_scrape(URLS[0]), fake_scrape(URLS[2])]
    assert combine(results) == ["東京地方裁判所", "東京家庭裁判所", "名古屋地方裁判所"]


def test_run_writes_successful_sources_and_combined(tmp_path):
    paths = run(URLS, str(tmp_path), 0, fake_scrape, lambda s: None)
    names = [os.path.basename(p) for p in paths]
    assert len(names) == 3
    assert names[0].endswith("_tokyo.txt")
    assert names[1].endswith("_nagoya.txt")
    assert names[2].endswith("_all_court_data.txt")
    combined = open(paths[2], encoding="utf-8").read().split("\n")
    assert combined == ["東京地方裁判所", "東京家庭裁判所", "名古屋地方裁判所"]


def test_run_skips_combined_file_when_empty(tmp_path):
    def empty(url):
        return SourceResult(url, [])

    paths = run(URLS[:1], str(tmp_path), 0, empty, lambda s: None)
    assert len(paths) == 1
    assert sorted(os.listdir(tmp_path)) == [os.path.basename(paths[0])]


def test_run_all_failed_writes_nothing(tmp_path):
    paths = run(URLS[1:2], str(tmp_path), 0, fake_scrape, lambda s: None)
    assert paths == []
    assert os.listdir(tmp_path) == []


def test_run_writes_records_as_csv(tmp_path):
    def tabular(url):
        record = {"court name": "知的財産高等裁判所", "place": "東京都目黒区", "phone": "03-3710-1111"}
        return SourceResult(url, ["知的財産高等裁判所"], [record])

    url = "https://www.courts.go.jp/ip/info/access/index.html"
    paths = run([url], str(tmp_path), 0, tabular, lambda s: None)
    assert paths[0].endswith("_ip.csv")
    with open(paths[0], encoding="utf-8") as f:
        assert f.readline().strip() == '"court name","place","phone"'
    df = pd.read_csv(paths[0], dtype=str)
    assert df.iloc[0]["phone"] == "03-3710-1111"


def test_write_failure_is_raised(tmp_path):
    missing = str(tmp_path / "no-such-dir")
    with pytest.raises(OSError):
        save_as_file(["東京地方裁判所"], "x.txt", missing)


def test_scrape_page_end_to_end():
    html = """
    <html><body>
      <a title="東京地方裁判所東京家庭裁判所" href="./a/">地裁・家裁</a>
      <a href="./b/">東京地方裁判所立川支部・八王子支部</a>
      <a href="./c/">裁判所内の案内</a>
    </body></html>
    """
    resp = MagicMock(status_code=200, text=html, encoding="utf-8")
    session = MagicMock()
    session.get.return_value = resp
    result = scrape_page("https://www.courts.go.jp/tokyo/syozai/index.html", session)
    assert result.records is None
    assert result.names == [
        "八王子支部",
        "東京地方裁判所",
        "東京家庭裁判所",
        "東京地方裁判所立川支部",
    ]


def test_main_uses_discovered_urls(monkeypatch, tmp_path):
    monkeypatch.setattr(scrape, "source_urls", lambda session: URLS[:1])
    monkeypatch.setattr(scrape, "OUTPUT_DIR", str(tmp_path))
    monkeypatch.setattr(scrape, "scrape_page", lambda url, session: fake_scrape(url))
    scrape.main()
    assert len(os.listdir(tmp_path)) == 2


def test_timestamp_format():
    now = datetime.datetime(2023, 10, 15, 12, 34, 56, 789000, tzinfo=datetime.timezone.utc)
    assert timestamp(now) == "2023-10-15T12-34-56-789Z"


def test_build_filename_and_basename():
    url = "https://www.courts.go.jp/tokyo/syozai/index.html"
    assert source_basename(url) == "tokyo"
    assert source_basename("https://example.com/kobe/list.html") == "kobe"
    assert build_filename("tokyo", "txt", "STAMP") == "STAMP_tokyo.txt"


TABLE_HTML = """
<html><body>
  <table>
    <tr><th>名称</th><th>所在地</th><th>電話番号</th></tr>
    <tr><td>知的財産高等裁判所 地図</td><td>東京都目黒区中目黒2-4-1</td><td>03-3710-1111</td></tr>
    <tr><td>東京地方裁判所立川支部</td><td>東京都立川市緑町10-4</td><td>042-845-0365</td></tr>
  </table>
</body></html>
"""


def make_session(pages):
    def get(url, timeout=None):
        return MagicMock(status_code=200, text=pages[url], encoding="utf-8")

    session = MagicMock()
    session.get.side_effect = get
    return session


def test_scrape_page_table_source_returns_names_and_records():
    url = "https://www.courts.go.jp/ip/info/access/index.html"
    result = scrape_page(url, make_session({url: TABLE_HTML}))
    assert result.names == ["知的財産高等裁判所", "東京地方裁判所立川支部"]
    assert [r["court name"] for r in result.records] == result.names
    assert result.records[0]["phone"] == "03-3710-1111"


def test_scrape_pages_isolates_parse_and_extraction_errors():
    good = '<html><body><a href="./a/">東京地方裁判所</a></body></html>'
    urls = [
        "https://www.courts.go.jp/tokyo/syozai/index.html",
        "https://www.courts.go.jp/ip/info/access/index.html",
        "https://www.courts.go.jp/osaka/syozai/index.html",
        "https://www.courts.go.jp/nagoya/syozai/index.html",
    ]
    pages = {
        urls[0]: good,
        # 列が足りない行
        urls[1]: "<table><tr><td>知的財産高等裁判所</td><td>東京都目黒区</td></tr></table>",
        urls[2]: "",
        urls[3]: good,
    }
    scrape_one = functools.partial(scrape_page, session=make_session(pages))
    results = scrape_pages(urls, 0, scrape_one, lambda s: None)
    assert [r.url for r in results] == [urls[0], urls[3]]
    assert combine(results) == ["東京地方裁判所"]


def test_free_filename_appends_counter(tmp_path):
    (tmp_path / "STAMP_ip.csv").write_text("")
    (tmp_path / "STAMP_ip-2.csv").write_text("")
    assert free_filename("STAMP_ip.csv", str(tmp_path)) == "STAMP_ip-3.csv"
    assert free_filename("STAMP_tokyo.txt", str(tmp_path)) == "STAMP_tokyo.txt"


def test_run_same_basename_does_not_overwrite(monkeypatch, tmp_path):
    monkeypatch.setattr(scrape, "timestamp", lambda: "STAMP")

    def tabular(url):
        record = {"court name": "知的財産高等裁判所", "place": url, "phone": "03-3710-1111"}
        return SourceResult(url, ["知的財産高等裁判所"], [record])

    urls = [
        "https://www.courts.go.jp/ip/info/access/index.html",
        "https://www.courts.go.jp/ip/about/syozai/index.html",
    ]
    paths = run(urls, str(tmp_path), 0, tabular, lambda s: None)
    assert [os.path.basename(p) for p in paths] == [
        "STAMP_ip.csv",
        "STAMP_ip-2.csv",
        "STAMP_all_court_data.txt",
    ]
    places = [pd.read_csv(p, dtype=str).iloc[0]["place"] for p in paths[:2]]
    assert places == urls
