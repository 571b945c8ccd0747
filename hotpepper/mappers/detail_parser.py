from hotpepper.mappers.html_text import clean_text, parse_html
from hotpepper.schemas.records import DetailFields

_DATA_TABLE = "table.slnDataTbl.bdCell.bgThNml.fgThNml.vaThT.pCellV10H12.mT20"
_DATA_TABLE_LOOSE = "table.slnDataTbl"

LABEL_FIELDS: dict[str, str] = {
    "電話番号": "tel_mask",
    "住所": "address",
    "アクセス・道案内": "access",
    "営業時間": "business_hours",
    "定休日": "holiday",
    "支払い方法": "payment",
    "カット価格": "cut_price",
    "スタッフ数": "staff_count",
    "こだわり条件": "features",
    "備考": "remark",
    "その他": "others",
}


def parse_detail_page(html: str) -> DetailFields:
    """Map the salon data table's label/value cells onto DetailFields.

    A row may carry several th/td pairs; the Nth th labels the Nth td.
    Labels outside LABEL_FIELDS are ignored, empty values stay absent and a
    repeated label keeps its last non-empty value.
    """
    soup = parse_html(html)
    table = soup.select_one(_DATA_TABLE) or soup.select_one(_DATA_TABLE_LOOSE)
    if table is None:
        return DetailFields()

    values: dict[str, str] = {}
    for row in table.find_all("tr"):
        labels = row.find_all("th")
        cells = row.find_all("td")
        for th, td in zip(labels, cells):
            field = LABEL_FIELDS.get(clean_text(th))
            if field is None:
                continue
            value = clean_text(td)
            if value:
                values[field] = value  # later rows override earlier ones

    return DetailFields(**values)
