# settings.py
from typing import Tuple

SITE_ROOT = "https://www.courts.go.jp/"
# 所在地・電話番号の一覧ページ（各裁判所サイトへのリンク集）
SEED_URL = SITE_ROOT + "courthouse/map_tel/index.html"
SEED_LINK_PATTERNS: Tuple[str, ...] = (
    "syozai/index.html",
    "ip/info/access/index.html",
)
# 空でなければ一覧ページを辿らずにこのURL群を使う
SOURCE_URLS: Tuple[str, ...] = ()

# ユーザーエージェント（一般的なブラウザ文字列）
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "ja,en;q=0.9",
}
REQUEST_TIMEOUT = 20  # 秒

# レート制御（リクエスト間の待機）
REQUEST_INTERVAL_SEC = 3.0

OUTPUT_DIR = "."
COMBINED_BASENAME = "all_court_data"
RECORD_COLUMNS: Tuple[str, ...] = ("court name", "place", "phone")
TEXT_ENCODING = "utf-8"
