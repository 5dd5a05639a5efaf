"""Test the per-segment decoders and the numeric/date helpers."""
import pytest
from edifact import decoders
from utils.schemas import PaymentInstructions


@pytest.mark.parametrize("text,expected", [
    ("12.5", 12.5),
    ("100", 100.0),
    ("-3", -3.0),
    ("abc", 0.0),
    ("", 0.0),
    (None, 0.0),
    ("nan", 0.0),
    ("inf", 0.0),
])
def test_to_float(text, expected):
    assert decoders.to_float(text) == expected


def test_to_int_accepts_decimal_text():
    assert decoders.to_int("3") == 3
    assert decoders.to_int("3.7") == 3
    assert decoders.to_int("x") == 0


def test_optional_helpers_keep_absence():
    assert decoders.optional_float(None) is None
    assert decoders.optional_float("") is None
    assert decoders.optional_float("junk") == 0.0
    assert decoders.optional_int("30") == 30


def test_format_date_rewrites_ccyymmdd_only():
    assert decoders.format_date("20240115", "102") == "2024-01-15"
    assert decoders.format_date("202401151030", "203") == "202401151030"
    assert decoders.format_date("20240115", None) == "20240115"
    assert decoders.format_date(None, "102") == ""


def test_decode_bgm(seg):
    bgm = decoders.decode_BGM(seg("BGM", "220", "PO12345", "9"))
    assert bgm == {"document_name_code": "220", "document_number": "PO12345", "message_function": "9"}


def test_decode_bgm_without_number(seg):
    bgm = decoders.decode_BGM(seg("BGM", "220"))
    assert bgm["document_number"] == ""
    assert bgm["message_function"] is None


def test_decode_dtm(seg):
    dtm = decoders.decode_DTM(seg("DTM", ["137", "20240115", "102"]))
    assert dtm.qualifier == "137"
    assert dtm.value == "20240115"
    assert dtm.format_qualifier == "102"


def test_decode_rff_sub_numbers(seg):
    rff = decoders.decode_RFF(seg("RFF", ["ON", "PO1", "", "3"]))
    assert rff.qualifier == "ON"
    assert rff.number == "PO1"
    assert rff.document_number is None
    assert rff.line_number == "3"


def test_decode_nad_full(seg):
    party = decoders.decode_NAD(seg(
        "NAD", "BY", ["5412345000013", "", "9"], "", ["Buyer Corp", "Purchasing"],
        "Main Street 1", "Brussels", "BRU", "1000", "BE",
    ))
    assert party.function_qualifier == "BY"
    assert party.identification.id == "5412345000013"
    assert party.identification.code_list_qualifier is None
    assert party.identification.responsible_agency == "9"
    assert party.name == "Buyer Corp"
    assert party.name_continuation == "Purchasing"
    assert party.street == "Main Street 1"
    assert party.city == "Brussels"
    assert party.country_sub_entity == "BRU"
    assert party.postal_code == "1000"
    assert party.country_code == "BE"
    assert party.contacts == []


def test_decode_nad_without_identification(seg):
    party = decoders.decode_NAD(seg("NAD", "DP", "", "", "Warehouse"))
    assert party.identification is None
    assert party.name == "Warehouse"
    assert party.city is None


def test_decode_com_needs_number_and_channel(seg):
    com = decoders.decode_COM(seg("COM", ["0032123456", "TE"]))
    assert com.number == "0032123456"
    assert com.channel_qualifier == "TE"
    assert decoders.decode_COM(seg("COM", "0032123456")) is None


def test_decode_cux(seg):
    assert decoders.decode_CUX(seg("CUX", ["2", "EUR", "9"])) == "EUR"
    assert decoders.decode_CUX(seg("CUX", "2")) is None


def test_decode_pat(seg):
    pat = decoders.decode_PAT(seg("PAT", "1", ["5", "30"], ["", "", "", "", "Net 30 days"]))
    assert pat.terms_type == "1"
    assert pat.period_type == "5"
    assert pat.period_count == 30
    assert pat.description == "Net 30 days"


def test_decode_tod(seg):
    tod = decoders.decode_TOD(seg("TOD", "6", "", ["EXW", "1", "", "Brussels"]))
    assert tod.code == "EXW"
    assert tod.code_qualifier == "1"
    assert tod.location == "Brussels"


def test_decode_tdt(seg):
    tdt = decoders.decode_TDT(seg("TDT", "20", "", "30", ["31", "Truck"], ["CARR1", "", "", "Fast Freight"]))
    assert tdt.stage_qualifier == "20"
    assert tdt.mode == "30"
    assert tdt.means_description == "31"
    assert tdt.carrier_id == "CARR1"
    assert tdt.carrier_name == "Fast Freight"
    assert tdt.means_id is None


def test_decode_ftx_collects_text_lines(seg):
    ftx = decoders.decode_FTX(seg("FTX", "AAI", "", "", ["Deliver to", "dock 4"]))
    assert ftx.subject_qualifier == "AAI"
    assert ftx.text == ["Deliver to", "dock 4"]


def test_decode_moa_garbage_amount(seg):
    moa = decoders.decode_MOA(seg("MOA", ["86", "12,00"]))
    assert moa.type_qualifier == "86"
    assert moa.amount == 0


def test_decode_pri(seg):
    pri = decoders.decode_PRI(seg("PRI", ["AAA", "4.50", "", "", "1", "PCE"]))
    assert pri.qualifier == "AAA"
    assert pri.amount == 4.5
    assert pri.unit_price_basis == 1.0
    assert pri.unit == "PCE"


def test_decode_tax(seg):
    tax = decoders.decode_TAX(seg("TAX", "7", "VAT", "", "", "21", "S"))
    assert tax.function_qualifier == "7"
    assert tax.type == "VAT"
    assert tax.rate == 21.0
    assert tax.category == "S"
    assert tax.amount is None


def test_decode_tax_defaults(seg):
    tax = decoders.decode_TAX(seg("TAX", "", "VAT", "", "", "n/a"))
    assert tax.function_qualifier == "7"
    assert tax.rate == 0.0
    assert tax.category is None


def test_decode_alc(seg):
    alc = decoders.decode_ALC(seg("ALC", "A", "1", "2", "", "DI"))
    assert alc.indicator == "A"
    assert alc.sequence_number == "1"
    assert alc.calculation_sequence == "2"
    assert alc.type == "DI"


def test_decode_lin(seg):
    lin = decoders.decode_LIN(seg("LIN", "1", "5", ["4000862141404", "SRV"]))
    assert lin["line_number"] == "1"
    assert lin["action_code"] == "5"
    assert lin["product_ids"][0].item_number == "4000862141404"
    assert lin["product_ids"][0].item_number_type == "SRV"


def test_decode_lin_without_product(seg):
    lin = decoders.decode_LIN(seg("LIN", "7"))
    assert lin["product_ids"] == []
    assert lin["action_code"] is None


def test_decode_pia_reads_every_id(seg):
    ids = decoders.decode_PIA(seg("PIA", "1", ["ART-1", "SA"], ["BUY-1", "IN"], "", ["X-9", "MF"]))
    assert [i.item_number for i in ids] == ["ART-1", "BUY-1", "X-9"]
    assert [i.item_number_type for i in ids] == ["SA", "IN", "MF"]


def test_decode_imd_free_text(seg):
    segment = seg("IMD", "F", "", ["", "", "", "Widget", "Blue"])
    assert decoders.decode_IMD(segment) == "Widget Blue"
    assert decoders.decode_IMD(segment, use_code=False) == "Widget Blue"


def test_decode_imd_code_fallback(seg):
    segment = seg("IMD", "C", "", ["CU"])
    assert decoders.decode_IMD(segment) == "CU"
    assert decoders.decode_IMD(segment, use_code=False) is None


def test_decode_qty(seg):
    qty = decoders.decode_QTY(seg("QTY", ["21", "10", "PCE"]))
    assert qty.qualifier == "21"
    assert qty.quantity == 10.0
    assert qty.unit == "PCE"


def test_decode_pac(seg):
    pac = decoders.decode_PAC(seg("PAC", "2", "1", "CT"))
    assert pac.number_of_packages == 2
    assert pac.packaging_level == "1"
    assert pac.package_type == "CT"


def test_decode_package_id(seg):
    assert decoders.decode_package_id(seg("GIN", "BJ", "354123450000000014")) == "354123450000000014"
    assert decoders.decode_package_id(seg("PCI", "33E")) is None


def test_decode_mea(seg):
    mea = decoders.decode_MEA(seg("MEA", "PD", "WT", ["", "12.5", "KGM"]))
    assert mea.dimension == "WT"
    assert mea.value == 12.5
    assert mea.unit == "KGM"


def test_decode_gir(seg):
    gir = decoders.decode_GIR(seg("GIR", "3", ["B123", "BX"], ["S1", "BN"], ["S2", "SE"], ["ZZ", "XX"]))
    assert gir["batch_number"] == "B123"
    assert gir["serial_numbers"] == ["S1", "S2"]


def test_decode_cnt(seg):
    assert decoders.decode_CNT(seg("CNT", ["2", "4"])) == {"qualifier": "2", "value": 4.0}


def test_decode_fii_and_merge(seg):
    fields = decoders.decode_FII(seg("FII", "BF", ["NL91ABNA0417164300", "ACME BV"], ["ABNANL2A", "", "", "", "ABN AMRO"]))
    merged = decoders.merge_payment_instructions(None, fields)
    assert merged == PaymentInstructions(
        account_number="NL91ABNA0417164300",
        account_holder_name="ACME BV",
        bank_identifier="ABNANL2A",
        bank_name="ABN AMRO",
    )

    second = decoders.decode_FII(seg("FII", "BF", "", ["", "", "", "", "Other Bank"]))
    merged = decoders.merge_payment_instructions(merged, second)
    assert merged.account_number == "NL91ABNA0417164300"
    assert merged.bank_name == "Other Bank"
