"""Test ORDERS and ORDRSP assembly."""
import pytest
from edifact.orders_parser import OrdersParser
from edifact.ordrsp_parser import OrdrspParser
from utils.schemas import OrdersDocument, OrdrspDocument, OrderResponseLineItem


@pytest.fixture
def orders_segments(seg):
    return [
        seg("BGM", "220", "PO12345", "9"),
        seg("DTM", ["137", "20240115", "102"]),
        seg("DTM", ["2", "20240120", "102"]),
        seg("FTX", "AAI", "", "", "Deliver to dock 4"),
        seg("RFF", ["CT", "CONTRACT-9"]),
        seg("NAD", "BY", ["5412345000013", "", "9"], "", "Buyer Corp", "Main Street 1", "Brussels", "", "1000", "BE"),
        seg("RFF", ["VA", "BE0123456789"]),
        seg("CTA", "OC", ["", "John Doe"]),
        seg("COM", ["0032123456", "TE"]),
        seg("COM", ["john@buyer.example", "EM"]),
        seg("NAD", "SU", ["5410000000009", "", "9"]),
        seg("CUX", ["2", "EUR", "9"]),
        seg("PAT", "1", ["5", "30"]),
        seg("TOD", "6", "", ["EXW", "", "", "Brussels"]),
        seg("TDT", "20", "", "30", "", ["CARR1", "", "", "Fast Freight"]),
        seg("ALC", "C", "", "", "", "FC"),
        seg("MOA", ["8", "25.00"]),
        seg("LIN", "1", "", ["4000862141404", "SRV"]),
        seg("PIA", "1", ["ART-1", "SA"], ["BUY-1", "IN"]),
        seg("IMD", "F", "", ["", "", "", "Widget", "Blue"]),
        seg("QTY", ["21", "10", "PCE"]),
        seg("DTM", ["2", "20240125", "102"]),
        seg("PRI", ["AAA", "4.50"]),
        seg("RFF", ["LI", "7"]),
        seg("MOA", ["203", "45.00"]),
        seg("TAX", "7", "VAT", "", "", "21", "S"),
        seg("ALC", "A"),
        seg("PAC", "2", "", "CT"),
        seg("FTX", "LIN", "", "", "fragile"),
        seg("LIN", "2", "", ["4000862141411", "SRV"]),
        seg("QTY", ["21", "5"]),
        seg("UNS", "S"),
        seg("CNT", ["2", "2"]),
        seg("CNT", ["39", "70"]),
        seg("CNT", ["99", "1"]),
    ]


@pytest.fixture
def orders(make_message, orders_segments):
    return OrdersParser().parse(make_message("ORDERS", orders_segments))


def test_orders_header(orders):
    assert isinstance(orders, OrdersDocument)
    assert orders.message_type == "ORDERS"
    assert orders.message_reference_number == "ME0001"
    assert orders.message_function == "9"
    assert orders.document_type_code == "220"
    assert orders.order_number == "PO12345"
    assert orders.order_date == "2024-01-15"
    assert [d.qualifier for d in orders.dates] == ["137", "2"]
    assert orders.free_text[0].text == ["Deliver to dock 4"]
    assert [r.qualifier for r in orders.references] == ["CT"]
    assert orders.currency == "EUR"
    assert orders.payment_terms.period_count == 30
    assert orders.delivery_terms.code == "EXW"
    assert orders.delivery_terms.location == "Brussels"
    assert orders.transport.mode == "30"
    assert orders.transport.carrier_name == "Fast Freight"


def test_orders_header_allowance_and_amount(orders):
    assert len(orders.allowances_charges) == 1
    assert orders.allowances_charges[0].indicator == "C"
    assert orders.allowances_charges[0].type == "FC"
    assert len(orders.amounts) == 1
    assert orders.amounts[0].type_qualifier == "8"
    assert orders.amounts[0].amount == 25.0


def test_orders_parties(orders):
    buyer, supplier = orders.parties
    assert buyer.function_qualifier == "BY"
    assert buyer.name == "Buyer Corp"
    assert buyer.identification.id == "5412345000013"
    assert [r.qualifier for r in buyer.references] == ["VA"]
    assert len(buyer.contacts) == 1
    assert buyer.contacts[0].name == "John Doe"
    assert [c.number for c in buyer.contacts[0].communications] == ["0032123456", "john@buyer.example"]
    assert supplier.function_qualifier == "SU"
    assert supplier.contacts == []
    assert supplier.references == []


def test_orders_line_items(orders):
    assert [line.line_number for line in orders.line_items] == ["1", "2"]
    first, second = orders.line_items

    assert [p.item_number for p in first.product_ids] == ["4000862141404", "ART-1", "BUY-1"]
    assert first.description == "Widget Blue"
    assert first.quantities[0].quantity == 10.0
    assert first.quantities[0].unit == "PCE"
    assert [d.value for d in first.dates] == ["20240125"]
    assert first.prices[0].amount == 4.5
    assert [r.qualifier for r in first.references] == ["LI"]
    assert first.amounts[0].amount == 45.0
    assert first.taxes[0].rate == 21.0
    assert first.taxes[0].category == "S"
    assert first.allowances_charges[0].indicator == "A"
    assert first.packages[0].number_of_packages == 2
    assert first.packages[0].package_type == "CT"
    assert first.additional_description[0].text == ["fragile"]

    assert second.quantities[0].quantity == 5.0
    assert second.quantities[0].unit is None
    assert second.prices == []


def test_orders_control_totals(orders):
    assert orders.control_totals.line_item_count == 2
    assert orders.control_totals.total_amount == 70


def test_orders_without_control_totals(make_message, seg):
    doc = OrdersParser().parse(make_message("ORDERS", [seg("BGM", "220", "PO1"), seg("CNT", ["11", "3"])]))
    assert doc.control_totals is None


def test_orders_empty_message(make_message):
    doc = OrdersParser().parse(make_message("ORDERS", [], message_function="5"))
    assert doc.order_number == ""
    assert doc.order_date == ""
    assert doc.message_function == "5"
    assert doc.parties == []
    assert doc.line_items == []


def test_orders_unknown_segments_are_skipped(make_message, seg):
    doc = OrdersParser().parse(make_message("ORDERS", [
        seg("BGM", "220", "PO1"),
        seg("ZZZ", "whatever"),
        seg("LIN", "1"),
        seg("XYZ"),
        seg("QTY", ["21", "1"]),
    ]))
    assert doc.line_items[0].quantities[0].quantity == 1.0


def test_orders_date_other_format_passes_through(make_message, seg):
    doc = OrdersParser().parse(make_message("ORDERS", [seg("DTM", ["137", "202401151030", "203"])]))
    assert doc.order_date == "202401151030"


def test_orders_cta_without_party_is_dropped(make_message, seg):
    doc = OrdersParser().parse(make_message("ORDERS", [
        seg("CTA", "OC", ["", "Nobody"]),
        seg("COM", ["123", "TE"]),
        seg("NAD", "BY"),
    ]))
    assert len(doc.parties) == 1
    assert doc.parties[0].contacts == []


def test_orders_party_count_matches_nad_count(make_message, seg):
    segments = []
    for i in range(5):
        segments.append(seg("NAD", f"Q{i}"))
        segments.append(seg("RFF", ["VA", str(i)]))
        segments.append(seg("CTA", "IC"))
        segments.append(seg("COM", [f"{i}", "TE"]))
    doc = OrdersParser().parse(make_message("ORDERS", segments))
    assert [p.function_qualifier for p in doc.parties] == [f"Q{i}" for i in range(5)]
    assert all(len(p.references) == 1 and len(p.contacts) == 1 for p in doc.parties)


def test_parser_holds_no_message_state(make_message, orders_segments, seg):
    parser = OrdersParser()
    first = parser.parse(make_message("ORDERS", orders_segments))
    parser.parse(make_message("ORDERS", [seg("BGM", "220", "OTHER")], reference="ME0002"))
    again = parser.parse(make_message("ORDERS", orders_segments))
    assert first.model_dump() == again.model_dump()


# ========================================================================
# ORDRSP
# ========================================================================

@pytest.fixture
def ordrsp(make_message, seg):
    return OrdrspParser().parse(make_message("ORDRSP", [
        seg("BGM", "231", "RSP-1", "4"),
        seg("DTM", ["137", "20240116", "102"]),
        seg("RFF", ["ON", "PO12345"]),
        seg("NAD", "SU", ["5410000000009", "", "9"]),
        seg("NAD", "BY", ["5412345000013", "", "9"]),
        seg("LIN", "1", "5", ["4000862141404", "SRV"]),
        seg("QTY", ["113", "8", "PCE"]),
        seg("RFF", ["ON", "PO99999"]),
        seg("LIN", "2", "7", ["4000862141411", "SRV"]),
        seg("LIN", "3", "3"),
        seg("LIN", "4", "1"),
        seg("UNS", "S"),
        seg("CNT", ["2", "4"]),
    ]))


def test_ordrsp_header(ordrsp):
    assert isinstance(ordrsp, OrdrspDocument)
    assert ordrsp.message_type == "ORDRSP"
    assert ordrsp.response_type == "231"
    assert ordrsp.response_number == "RSP-1"
    assert ordrsp.response_date == "2024-01-16"
    assert ordrsp.message_function == "4"
    assert ordrsp.order_reference == "PO12345"
    assert [p.function_qualifier for p in ordrsp.parties] == ["SU", "BY"]
    assert ordrsp.control_totals.line_item_count == 4


def test_ordrsp_line_status(ordrsp):
    assert all(isinstance(line, OrderResponseLineItem) for line in ordrsp.line_items)
    assert [line.status for line in ordrsp.line_items] == ["Amended", "Not accepted", "Accepted", None]
    assert [line.action_code for line in ordrsp.line_items] == ["5", "7", "3", "1"]


def test_ordrsp_line_reference_does_not_change_order_reference(ordrsp):
    first = ordrsp.line_items[0]
    assert first.quantities[0].qualifier == "113"
    assert first.references[0].number == "PO99999"
    assert ordrsp.order_reference == "PO12345"


def test_ordrsp_without_order_reference(make_message, seg):
    doc = OrdrspParser().parse(make_message("ORDRSP", [seg("BGM", "231", "RSP-2"), seg("RFF", ["CT", "C-1"])]))
    assert doc.order_reference == ""
    assert doc.references[0].qualifier == "CT"
