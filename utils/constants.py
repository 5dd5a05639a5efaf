# Message types the dispatcher knows how to assemble
SUPPORTED_MESSAGE_TYPES = ["ORDERS", "ORDRSP", "DESADV", "INVOIC"]

# DTM 2005 - date/time/period qualifiers
DATE_DOCUMENT = "137"
DATE_DELIVERY = "132"

# DTM 2379 - CCYYMMDD
DATE_FORMAT_CCYYMMDD = "102"

# RFF 1153 - reference qualifiers
REFERENCE_ORDER = "ON"
REFERENCE_DESPATCH = "DQ"

# CNT 6069 - control total qualifiers
COUNT_LINE_ITEMS = "2"
COUNT_TOTAL_AMOUNT = "39"
COUNT_PACKAGES = ["7", "52"]

# MEA 6313 - dimensions written to gross weight
GROSS_WEIGHT_DIMENSIONS = ["AAB", "WT"]

# GIR 7405 - identity number qualifiers
BATCH_QUALIFIERS = ["BT", "BX"]
SERIAL_QUALIFIERS = ["BN", "SE"]

# LIN 1229 action codes carried on order responses
LINE_STATUS_BY_ACTION = {
    "3": "Accepted",
    "5": "Amended",
    "7": "Not accepted",
}

# MOA 5025 - line amount on invoices
AMOUNT_LINE_ITEM = "203"

# MOA 5025 following ALC (allowance/charge amount, basis)
ALLOWANCE_AMOUNT_QUALIFIERS = ["23", "204"]
ALLOWANCE_BASIS_QUALIFIERS = ["25"]

# MOA 5025 following TAX (tax amount, taxable basis)
TAX_AMOUNT_QUALIFIERS = ["124", "176"]
TAX_BASIS_QUALIFIERS = ["125"]

# MOA 5025 in the invoice summary section -> InvoiceTotals field
INVOICE_TOTALS_MAP = {
    "79": "line_items_total",
    "131": "total_allowances",
    "259": "total_charges",
    "125": "taxable_amount",
    "176": "total_tax_amount",
    "86": "invoice_total",
    "77": "invoice_total",
    "9": "amount_due",
    "113": "prepaid_amount",
}
