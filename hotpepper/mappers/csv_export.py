import csv
import io
from urllib.parse import quote

from hotpepper.schemas.records import FullRecord

# (header, FullRecord attribute)
COLUMNS: tuple[tuple[str, str], ...] = (
    ("店名", "name"),
    ("URL", "url"),
    ("住所", "address"),
    ("アクセス・道案内", "access"),
    ("営業時間", "business_hours"),
    ("定休日", "holiday"),
    ("支払い方法", "payment"),
    ("カット価格", "cut_price"),
    ("スタッフ数", "staff_count"),
    ("こだわり条件", "features"),
    ("備考", "remark"),
    ("その他", "others"),
    ("電話番号", "resolved_phone"),
)


def record_to_row(record: FullRecord) -> list[str]:
    row = []
    for _, attr in COLUMNS:
        value = getattr(record, attr)
        row.append("" if value is None else str(value))
    return row


def records_to_csv(records: list[FullRecord]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([header for header, _ in COLUMNS])
    for record in records:
        writer.writerow(record_to_row(record))
    return buf.getvalue()


def export_filename(keyword: str) -> str:
    return f"hotpepper_{quote(keyword)}.csv"
