from html_pages import detail_page
from hotpepper.mappers.detail_parser import parse_detail_page
from hotpepper.schemas.records import DetailFields


def test_phone_and_address():
    html = detail_page({"電話番号": "03-1234-5678", "住所": "Tokyo"})
    assert parse_detail_page(html) == DetailFields(tel_mask="03-1234-5678", address="Tokyo")


def test_all_labels_mapped():
    html = detail_page({
        "電話番号": "03-0000-0000",
        "住所": "東京都渋谷区",
        "アクセス・道案内": "駅徒歩3分",
        "営業時間": "10:00～20:00",
        "定休日": "火曜日",
        "支払い方法": "VISA",
        "カット価格": "￥5,500",
        "スタッフ数": "10人",
        "こだわり条件": "駐車場あり",
        "備考": "予約優先",
        "その他": "Wi-Fi",
    })
    fields = parse_detail_page(html)

    assert fields.access == "駅徒歩3分"
    assert fields.business_hours == "10:00～20:00"
    assert fields.holiday == "火曜日"
    assert fields.payment == "VISA"
    assert fields.cut_price == "￥5,500"
    assert fields.staff_count == "10人"
    assert fields.features == "駐車場あり"
    assert fields.remark == "予約優先"
    assert fields.others == "Wi-Fi"


def test_multiple_pairs_per_row():
    html = (
        '<table class="slnDataTbl bdCell bgThNml fgThNml vaThT pCellV10H12 mT20">'
        "<tr><th>定休日</th><td>月曜</td><th>スタッフ数</th><td>5人</td></tr>"
        "</table>"
    )
    fields = parse_detail_page(html)
    assert fields.holiday == "月曜"
    assert fields.staff_count == "5人"


def test_unknown_labels_ignored():
    html = detail_page({"席数": "8", "住所": "Osaka"})
    assert parse_detail_page(html) == DetailFields(address="Osaka")


def test_whitespace_collapsed():
    html = detail_page({"営業時間": "\n  10:00\n   ～ 20:00  "})
    assert parse_detail_page(html).business_hours == "10:00 ～ 20:00"


def test_empty_value_stays_absent():
    html = detail_page({"備考": "  "})
    assert parse_detail_page(html).remark is None


def test_repeated_label_last_value_wins():
    html = detail_page({})
    html = html.replace(
        "<tbody></tbody>",
        "<tbody><tr><th>住所</th><td>Osaka</td></tr>"
        "<tr><th>住所</th><td>Kobe</td></tr>"
        "<tr><th>住所</th><td> </td></tr></tbody>",
    )
    assert parse_detail_page(html).address == "Kobe"


def test_loose_table_fallback():
    html = '<table class="slnDataTbl"><tr><th>住所</th><td>Kyoto</td></tr></table>'
    assert parse_detail_page(html).address == "Kyoto"


def test_missing_table_is_empty():
    assert parse_detail_page("<p>maintenance</p>") == DetailFields()
    assert parse_detail_page("") == DetailFields()
