"""
Per-segment decoders.
Each function turns one addressed segment into a typed sub-structure from utils.schemas.
Decoders are pure: they never raise on missing or malformed data.
"""
import math
from typing import List, Optional, Dict
from edifact.segments import element, component
from utils.constants import DATE_FORMAT_CCYYMMDD, BATCH_QUALIFIERS, SERIAL_QUALIFIERS
from utils.schemas import (
    Segment, Party, PartyIdentification, Contact, Communication, Reference, DateTimePeriod,
    MonetaryAmount, Quantity, Price, Tax, AllowanceCharge, ProductIdentifier, FreeText,
    Measurement, PaymentTerms, DeliveryTerms, TransportDetails, PackageInfo, PaymentInstructions
)


# ========================================================================
# Numeric and date helpers
# ========================================================================

def to_float(text: Optional[str]) -> float:
    """Parse a numeric value; missing or malformed text yields 0."""
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def to_int(text: Optional[str]) -> int:
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        return int(to_float(text))


def optional_float(text: Optional[str]) -> Optional[float]:
    return to_float(text) if text else None


def optional_int(text: Optional[str]) -> Optional[int]:
    return to_int(text) if text else None


def format_date(value: Optional[str], format_qualifier: Optional[str]) -> str:
    """
    Normalise a DTM value for the named date fields.

    Only format 102 (CCYYMMDD) is rewritten, to YYYY-MM-DD. Every other format
    qualifier is passed through unchanged.
    """
    if not value:
        return ""
    if format_qualifier == DATE_FORMAT_CCYYMMDD:
        return f"{value[0:4]}-{value[4:6]}-{value[6:8]}"
    return value


# ========================================================================
# Header segments
# ========================================================================

def decode_BGM(segment: Segment) -> Dict[str, Optional[str]]:
    """BGM - Beginning of message"""
    return {
        "document_name_code": component(segment, 1, 1),
        "document_number": element(segment, 2) or "",
        "message_function": element(segment, 3),
    }


def decode_DTM(segment: Segment) -> DateTimePeriod:
    """DTM - Date/time/period"""
    return DateTimePeriod(
        qualifier=component(segment, 1, 1) or "",
        value=component(segment, 1, 2),
        format_qualifier=component(segment, 1, 3),
    )


def decode_RFF(segment: Segment) -> Reference:
    """RFF - Reference"""
    return Reference(
        qualifier=component(segment, 1, 1) or "",
        number=component(segment, 1, 2),
        document_number=component(segment, 1, 3),
        line_number=component(segment, 1, 4),
    )


def decode_NAD(segment: Segment) -> Party:
    """NAD - Name and address"""
    party_id = component(segment, 2, 1)
    identification = None
    if party_id:
        identification = PartyIdentification(
            id=party_id,
            code_list_qualifier=component(segment, 2, 2),
            responsible_agency=component(segment, 2, 3),
        )

    return Party(
        function_qualifier=element(segment, 1) or "",
        identification=identification,
        name=component(segment, 4, 1),
        name_continuation=component(segment, 4, 2),
        street=component(segment, 5, 1),
        city=element(segment, 6),
        country_sub_entity=element(segment, 7),
        postal_code=element(segment, 8),
        country_code=element(segment, 9),
    )


def decode_CTA(segment: Segment) -> Contact:
    """CTA - Contact information (communications are added by the COM group reader)"""
    return Contact(
        function_code=element(segment, 1) or "",
        name=component(segment, 2, 2),
    )


def decode_COM(segment: Segment) -> Optional[Communication]:
    """COM - Communication contact; None unless both number and channel are present"""
    number = component(segment, 1, 1)
    channel = component(segment, 1, 2)
    if number and channel:
        return Communication(number=number, channel_qualifier=channel)
    return None


def decode_CUX(segment: Segment) -> Optional[str]:
    """CUX - Currencies"""
    return component(segment, 1, 2)


def decode_PAT(segment: Segment) -> PaymentTerms:
    """PAT - Payment terms basis"""
    return PaymentTerms(
        terms_type=element(segment, 1),
        period_type=component(segment, 2, 1),
        period_count=optional_int(component(segment, 2, 2)),
        description=component(segment, 3, 5),
    )


def decode_TOD(segment: Segment) -> DeliveryTerms:
    """TOD - Terms of delivery or transport"""
    return DeliveryTerms(
        code=component(segment, 3, 1),
        code_qualifier=component(segment, 3, 2),
        location=component(segment, 3, 4),
    )


def decode_TDT(segment: Segment) -> TransportDetails:
    """TDT - Details of transport"""
    return TransportDetails(
        stage_qualifier=element(segment, 1),
        mode=element(segment, 3),
        means_description=component(segment, 4, 1),
        carrier_id=component(segment, 5, 1),
        carrier_name=component(segment, 5, 4),
        means_id=component(segment, 8, 1),
        means_nationality=component(segment, 8, 3),
    )


def decode_FTX(segment: Segment) -> FreeText:
    """FTX - Free text"""
    lines = []
    for position in range(1, 6):
        line = component(segment, 4, position)
        if line:
            lines.append(line)
    return FreeText(
        subject_qualifier=element(segment, 1) or "",
        function_code=element(segment, 2),
        text=lines,
    )


def decode_FII(segment: Segment) -> Dict[str, Optional[str]]:
    """FII - Financial institution information (partial PaymentInstructions fields)"""
    return {
        "account_number": component(segment, 2, 1),
        "account_holder_name": component(segment, 2, 2),
        "bank_identifier": component(segment, 3, 1),
        "bank_name": component(segment, 3, 5),
    }


def merge_payment_instructions(current: Optional[PaymentInstructions], fields: Dict[str, Optional[str]]) -> PaymentInstructions:
    data = current.model_dump() if current else {}
    data.update({key: value for key, value in fields.items() if value is not None})
    return PaymentInstructions(**data)


# ========================================================================
# Amounts, prices, taxes, allowances
# ========================================================================

def decode_MOA(segment: Segment) -> MonetaryAmount:
    """MOA - Monetary amount"""
    return MonetaryAmount(
        type_qualifier=component(segment, 1, 1) or "",
        amount=to_float(component(segment, 1, 2)),
        currency=component(segment, 1, 3),
    )


def decode_PRI(segment: Segment) -> Price:
    """PRI - Price details"""
    return Price(
        qualifier=component(segment, 1, 1) or "",
        amount=to_float(component(segment, 1, 2)),
        price_type=component(segment, 1, 3),
        specification_code=component(segment, 1, 4),
        unit_price_basis=optional_float(component(segment, 1, 5)),
        unit=component(segment, 1, 6),
    )


def decode_TAX(segment: Segment) -> Tax:
    """TAX - Duty/tax/fee details"""
    return Tax(
        function_qualifier=element(segment, 1) or "7",
        type=component(segment, 2, 1),
        category=element(segment, 6),
        rate=optional_float(element(segment, 5)),
    )


def decode_ALC(segment: Segment) -> AllowanceCharge:
    """ALC - Allowance or charge"""
    return AllowanceCharge(
        indicator=element(segment, 1),
        type=component(segment, 5, 1),
        sequence_number=element(segment, 2),
        calculation_sequence=element(segment, 3),
    )


def decode_PCD(segment: Segment) -> Optional[float]:
    """PCD - Percentage details"""
    return optional_float(component(segment, 1, 2))


# ========================================================================
# Line item segments
# ========================================================================

def decode_LIN(segment: Segment) -> Dict:
    """LIN - Line item: line number, action code and the primary product id"""
    product_ids = []
    item_number = component(segment, 3, 1)
    if item_number:
        product_ids.append(ProductIdentifier(
            item_number=item_number,
            item_number_type=component(segment, 3, 2),
            responsible_agency=component(segment, 3, 3),
        ))
    return {
        "line_number": element(segment, 1) or "",
        "action_code": element(segment, 2),
        "product_ids": product_ids,
    }


def decode_PIA(segment: Segment) -> List[ProductIdentifier]:
    """PIA - Additional product id (up to four ids in elements 2-5)"""
    ids = []
    for position in range(2, 6):
        item_number = component(segment, position, 1)
        if item_number:
            ids.append(ProductIdentifier(
                item_number=item_number,
                item_number_type=component(segment, position, 2),
                responsible_agency=component(segment, position, 3),
            ))
    return ids


def decode_IMD(segment: Segment, use_code: bool = True) -> Optional[str]:
    """
    IMD - Item description.

    Free text (C273 components 4 and 5) wins; otherwise the description code
    is used when `use_code` is set.
    """
    free_text = component(segment, 3, 4)
    free_text_2 = component(segment, 3, 5)
    if free_text:
        return f"{free_text} {free_text_2}" if free_text_2 else free_text
    if use_code:
        return component(segment, 3, 1)
    return None


def decode_QTY(segment: Segment) -> Quantity:
    """QTY - Quantity"""
    return Quantity(
        qualifier=component(segment, 1, 1) or "",
        quantity=to_float(component(segment, 1, 2)),
        unit=component(segment, 1, 3),
    )


def decode_PAC(segment: Segment) -> PackageInfo:
    """PAC - Package"""
    return PackageInfo(
        number_of_packages=optional_int(element(segment, 1)),
        packaging_level=element(segment, 2),
        package_type=component(segment, 3, 1),
    )


def decode_package_id(segment: Segment) -> Optional[str]:
    """PCI / GIN - package identifier (SSCC) from element 2"""
    return component(segment, 2, 1)


def decode_MEA(segment: Segment) -> Measurement:
    """MEA - Measurements"""
    return Measurement(
        dimension=element(segment, 2) or "",
        value=to_float(component(segment, 3, 2)),
        unit=component(segment, 3, 3),
    )


def decode_GIR(segment: Segment) -> Dict:
    """GIR - Related identification numbers (batch and serial numbers)"""
    batch_number = None
    serial_numbers = []
    for position in range(2, 7):
        value = component(segment, position, 1)
        qualifier = component(segment, position, 2)
        if not value:
            continue
        if qualifier in BATCH_QUALIFIERS:
            batch_number = value
        elif qualifier in SERIAL_QUALIFIERS:
            serial_numbers.append(value)
    return {"batch_number": batch_number, "serial_numbers": serial_numbers}


def decode_CNT(segment: Segment) -> Dict:
    """CNT - Control total"""
    return {
        "qualifier": component(segment, 1, 1) or "",
        "value": to_float(component(segment, 1, 2)),
    }
