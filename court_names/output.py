# output.py
import csv
import datetime
import logging
import os
import re
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .settings import OUTPUT_DIR, RECORD_COLUMNS, SITE_ROOT, TEXT_ENCODING

log = logging.getLogger(__name__)


def timestamp(now: Optional[datetime.datetime] = None) -> str:
    """
    ファイル名に使える形式のタイムスタンプ
    例: "2023-10-15T12-34-56-789Z"
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    iso = now.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    iso += ".{:03d}Z".format(now.microsecond // 1000)
    return re.sub(r"[:.]", "-", iso)


def source_basename(url: str) -> str:
    if url.startswith(SITE_ROOT):
        rest = url[len(SITE_ROOT):]
    else:
        rest = re.sub(r"^[a-zA-Z]+://[^/]+/?", "", url)
    return rest.split("/")[0] or "index"


def build_filename(basename: str, ext: str = "txt", stamp: Optional[str] = None) -> str:
    return f"{stamp or timestamp()}_{basename}.{ext}"


def free_filename(filename: str, out_dir: str = OUTPUT_DIR) -> str:
    # 同じ名前のファイルがあれば "-2", "-3", ... を付けて上書きを避ける
    stem, ext = os.path.splitext(filename)
    candidate = filename
    n = 2
    while os.path.exists(os.path.join(out_dir, candidate)):
        candidate = f"{stem}-{n}{ext}"
        n += 1
    return candidate


def save_as_file(lines: Sequence[str], filename: str, out_dir: str = OUTPUT_DIR) -> str:
    path = os.path.join(out_dir, filename)
    try:
        with open(path, "w", encoding=TEXT_ENCODING) as f:
            f.write("\n".join(lines))
    except OSError:
        log.exception("ファイルの書き込み中にエラーが発生しました: %s", path)
        raise
    log.info("書き出し完了: %s（%d件）", path, len(lines))
    return path


def to_dataframe(records: List[Dict[str, str]]) -> pd.DataFrame:
    df = pd.DataFrame(records, columns=list(RECORD_COLUMNS))
    return df.fillna("")


def save_records_csv(
    records: List[Dict[str, str]], filename: str, out_dir: str = OUTPUT_DIR
) -> str:
    path = os.path.join(out_dir, filename)
    df = to_dataframe(records)
    try:
        df.to_csv(path, index=False, encoding=TEXT_ENCODING, quoting=csv.QUOTE_ALL)
    except OSError:
        log.exception("ファイルの書き込み中にエラーが発生しました: %s", path)
        raise
    log.info("書き出し完了: %s（%d件）", path, len(df))
    return path
