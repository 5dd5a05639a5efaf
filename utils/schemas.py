from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Literal, Union, Any, Annotated


# ============================================================================
# Input contract: tokenized segments handed over by the EDI lexer
# ============================================================================

# Data element, optionally broken into components (composite element)
class Element(BaseModel):
    value: str = Field("", description="Raw element value (first component for composites)")
    components: Optional[List[str]] = Field(None, description="Component values when the element is composite")

    @model_validator(mode="after")
    def _value_from_components(self):
        # A composite's raw value is its first component
        if not self.value and self.components:
            self.value = self.components[0]
        return self


# One EDIFACT segment (NAD, LIN, DTM, ...)
class Segment(BaseModel):
    tag: str = Field(..., description="Three letter segment tag")
    elements: List[Element] = Field(default_factory=list, description="Data elements, 1-based in EDIFACT terms")

    @field_validator("elements", mode="before")
    @classmethod
    def _coerce_elements(cls, value: Any):
        # Plain strings are simple elements, lists of strings are composites
        if not isinstance(value, list):
            return value
        coerced = []
        for item in value:
            if item is None:
                coerced.append({"value": ""})
            elif isinstance(item, str):
                coerced.append({"value": item})
            elif isinstance(item, (list, tuple)):
                # null components are absent, not the text "None"
                components = ["" if c is None else str(c) for c in item]
                coerced.append({"value": components[0] if components else "", "components": components})
            else:
                coerced.append(item)
        return coerced


# UNH message header
class MessageHeader(BaseModel):
    message_reference_number: str = Field(..., description="0062 - Message reference number")
    message_type: str = Field(..., description="S009 - Message type (ORDERS, INVOIC, etc.)")
    version: Optional[str] = Field(None, description="Message version number (D)")
    release: Optional[str] = Field(None, description="Message release number (96A, 01B, etc.)")
    controlling_agency: Optional[str] = Field(None, description="Controlling agency (UN, EAN)")
    message_function: Optional[str] = Field(None, description="Message function code (9=Original, 5=Replace, 1=Cancellation)")


# One message between UNH and UNT
class Message(BaseModel):
    header: MessageHeader
    segments: List[Segment] = Field(default_factory=list, description="Segments between UNH and UNT")


# ============================================================================
# Shared substructures
# ============================================================================

# Party identification (NAD C082)
class PartyIdentification(BaseModel):
    id: str = Field(..., description="Party identifier (GLN, etc.)")
    code_list_qualifier: Optional[str] = Field(None, description="Code list qualifier")
    responsible_agency: Optional[str] = Field(None, description="Code list responsible agency (9=GS1)")


# Communication channel (COM segment)
class Communication(BaseModel):
    number: str = Field(..., description="Communication number (phone, email, etc.)")
    channel_qualifier: str = Field(..., description="TE=Telephone, FX=Fax, EM=Email, etc.")


# Contact information (CTA segment + COM group)
class Contact(BaseModel):
    function_code: str = Field("", description="AD=Admin, OC=Order contact, etc.")
    name: Optional[str] = Field(None, description="Contact name")
    communications: List[Communication] = Field(default_factory=list, description="Communication channels")


# Reference (RFF segment)
class Reference(BaseModel):
    qualifier: str = Field("", description="ON=Order number, CT=Contract, IV=Invoice, etc.")
    number: Optional[str] = Field(None, description="Reference number")
    document_number: Optional[str] = Field(None, description="Document/message number")
    line_number: Optional[str] = Field(None, description="Line number")


# Party/name and address (NAD segment)
class Party(BaseModel):
    function_qualifier: str = Field("", description="BY=Buyer, SU=Supplier, DP=Delivery party, etc.")
    identification: Optional[PartyIdentification] = Field(None, description="Party identification")
    name: Optional[str] = Field(None, description="Party name")
    name_continuation: Optional[str] = Field(None, description="Party name continuation")
    street: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City name")
    country_sub_entity: Optional[str] = Field(None, description="State/province")
    postal_code: Optional[str] = Field(None, description="Postal code")
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 country code")
    contacts: List[Contact] = Field(default_factory=list, description="Contacts (CTA/COM)")
    references: List[Reference] = Field(default_factory=list, description="Party references (RFF)")


# Date/time/period (DTM segment)
class DateTimePeriod(BaseModel):
    qualifier: str = Field("", description="137=Document date, 2=Delivery date, etc.")
    value: Optional[str] = Field(None, description="Raw date/time value")
    format_qualifier: Optional[str] = Field(None, description="102=CCYYMMDD, 203=CCYYMMDDHHMM, etc.")


# Monetary amount (MOA segment)
class MonetaryAmount(BaseModel):
    type_qualifier: str = Field("", description="39=Invoice amount, 86=Message total, 203=Line amount, etc.")
    amount: float = Field(0, description="Amount")
    currency: Optional[str] = Field(None, description="Currency if different from message level")


# Quantity (QTY segment)
class Quantity(BaseModel):
    qualifier: str = Field("", description="21=Ordered, 47=Invoiced, 12=Despatch, etc.")
    quantity: float = Field(0, description="Quantity value")
    unit: Optional[str] = Field(None, description="PCE=Piece, KGM=Kilogram, etc.")


# Price (PRI segment)
class Price(BaseModel):
    qualifier: str = Field("", description="AAA=Calculation net, AAB=Calculation gross, etc.")
    amount: float = Field(0, description="Price amount")
    price_type: Optional[str] = Field(None, description="Price type code")
    specification_code: Optional[str] = Field(None, description="Price specification code")
    unit_price_basis: Optional[float] = Field(None, description="Unit price basis")
    unit: Optional[str] = Field(None, description="Unit of measure")


# Duty/tax/fee (TAX segment, MOA in invoices)
class Tax(BaseModel):
    function_qualifier: str = Field("7", description="7=Tax")
    type: Optional[str] = Field(None, description="VAT, GST, etc.")
    category: Optional[str] = Field(None, description="S=Standard, E=Exempt, etc.")
    rate: Optional[float] = Field(None, description="Tax rate percentage")
    amount: Optional[float] = Field(None, description="Tax amount")
    basis_amount: Optional[float] = Field(None, description="Taxable basis amount")


# Allowance or charge (ALC segment, PCD/MOA in invoices)
class AllowanceCharge(BaseModel):
    indicator: Optional[str] = Field(None, description="A=Allowance, C=Charge")
    type: Optional[str] = Field(None, description="Special services code")
    sequence_number: Optional[str] = Field(None, description="Settlement sequence")
    calculation_sequence: Optional[str] = Field(None, description="Calculation sequence indicator")
    percentage: Optional[float] = Field(None, description="Allowance/charge percentage")
    amount: Optional[float] = Field(None, description="Allowance/charge amount")
    basis_amount: Optional[float] = Field(None, description="Basis amount")


# Product identification (LIN, PIA)
class ProductIdentifier(BaseModel):
    item_number: str = Field(..., description="GTIN, buyer's article number, etc.")
    item_number_type: Optional[str] = Field(None, description="SRV=GTIN, IN=Buyer's item number, SA=Supplier's, etc.")
    responsible_agency: Optional[str] = Field(None, description="Code list responsible agency (9=GS1)")


# Free text (FTX segment)
class FreeText(BaseModel):
    subject_qualifier: str = Field("", description="AAA=General info, DEL=Delivery info, etc.")
    function_code: Optional[str] = Field(None, description="Text function code")
    text: List[str] = Field(default_factory=list, description="Text lines")


# Measurement (MEA segment)
class Measurement(BaseModel):
    dimension: str = Field("", description="AAB/WT=Gross weight, HT=Height, LN=Length, etc.")
    value: float = Field(0, description="Measured value")
    unit: Optional[str] = Field(None, description="Measure unit (KGM, CMT, etc.)")


# Payment terms (PAT segment)
class PaymentTerms(BaseModel):
    terms_type: Optional[str] = Field(None, description="1=Basic, 3=Fixed date, etc.")
    period_type: Optional[str] = Field(None, description="Payment time reference")
    period_count: Optional[int] = Field(None, description="Number of periods (e.g., net days)")
    description: Optional[str] = Field(None, description="Terms description")


# Terms of delivery (TOD segment)
class DeliveryTerms(BaseModel):
    code: Optional[str] = Field(None, description="Incoterms code (EXW, DDP, etc.)")
    code_qualifier: Optional[str] = Field(None, description="Code list qualifier")
    location: Optional[str] = Field(None, description="Delivery terms location")


# Transport (TDT segment)
class TransportDetails(BaseModel):
    stage_qualifier: Optional[str] = Field(None, description="20=Main carriage, etc.")
    mode: Optional[str] = Field(None, description="Transport mode code")
    means_description: Optional[str] = Field(None, description="Transport means description")
    carrier_id: Optional[str] = Field(None, description="Carrier identification")
    carrier_name: Optional[str] = Field(None, description="Carrier name")
    means_id: Optional[str] = Field(None, description="Transport means identification (vehicle)")
    means_nationality: Optional[str] = Field(None, description="Nationality of means of transport")


# Package information on an order line (PAC segment)
class PackageInfo(BaseModel):
    number_of_packages: Optional[int] = Field(None, description="Number of packages")
    packaging_level: Optional[str] = Field(None, description="Packaging level code")
    package_type: Optional[str] = Field(None, description="Package type (CT=Carton, PX=Pallet, etc.)")


# Control totals (CNT segment)
class ControlTotals(BaseModel):
    line_item_count: Optional[float] = Field(None, description="CNT 2 - Number of line items")
    total_amount: Optional[float] = Field(None, description="CNT 39 - Total amount")


# ============================================================================
# ORDERS / ORDRSP
# ============================================================================

# Line item (LIN group)
class OrderLineItem(BaseModel):
    line_number: str = Field("", description="Line item number")
    action_code: Optional[str] = Field(None, description="Action request/notification code")
    product_ids: List[ProductIdentifier] = Field(default_factory=list, description="LIN and PIA product ids")
    description: Optional[str] = Field(None, description="Item description (IMD)")
    quantities: List[Quantity] = Field(default_factory=list, description="Quantities")
    prices: List[Price] = Field(default_factory=list, description="Prices")
    amounts: List[MonetaryAmount] = Field(default_factory=list, description="Line amounts")
    references: List[Reference] = Field(default_factory=list, description="Line references")
    dates: List[DateTimePeriod] = Field(default_factory=list, description="Line dates")
    allowances_charges: List[AllowanceCharge] = Field(default_factory=list, description="Line allowances/charges")
    taxes: List[Tax] = Field(default_factory=list, description="Line taxes")
    additional_description: List[FreeText] = Field(default_factory=list, description="Line free text")
    packages: List[PackageInfo] = Field(default_factory=list, description="Line packaging")


class OrderResponseLineItem(OrderLineItem):
    response_type: Optional[str] = Field(None, description="AC=Accepted, AK=Acknowledged, etc.")
    status: Optional[str] = Field(None, description="Accepted, Amended, Not accepted")
    reason_for_change: Optional[str] = Field(None, description="Reason for difference")


class OrdersDocument(BaseModel):
    message_type: Literal["ORDERS"] = "ORDERS"
    message_reference_number: str = Field(..., description="UNH message reference number")
    message_function: Optional[str] = Field(None, description="9=Original, 5=Replace, 1=Cancellation")
    document_type_code: Optional[str] = Field(None, description="220=Order, etc.")
    order_number: str = Field("", description="BGM document number")
    order_date: str = Field("", description="DTM 137 document date")
    currency: Optional[str] = Field(None, description="CUX currency")
    payment_terms: Optional[PaymentTerms] = None
    delivery_terms: Optional[DeliveryTerms] = None
    transport: Optional[TransportDetails] = None
    parties: List[Party] = Field(default_factory=list)
    dates: List[DateTimePeriod] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    amounts: List[MonetaryAmount] = Field(default_factory=list)
    allowances_charges: List[AllowanceCharge] = Field(default_factory=list)
    taxes: List[Tax] = Field(default_factory=list)
    free_text: List[FreeText] = Field(default_factory=list)
    line_items: List[OrderLineItem] = Field(default_factory=list)
    control_totals: Optional[ControlTotals] = None


class OrdrspDocument(BaseModel):
    message_type: Literal["ORDRSP"] = "ORDRSP"
    message_reference_number: str = Field(..., description="UNH message reference number")
    message_function: Optional[str] = Field(None, description="Message function code")
    response_number: str = Field("", description="BGM document number")
    response_date: str = Field("", description="DTM 137 document date")
    order_reference: str = Field("", description="RFF ON - original order number")
    response_type: Optional[str] = Field(None, description="BGM document name code")
    currency: Optional[str] = None
    payment_terms: Optional[PaymentTerms] = None
    delivery_terms: Optional[DeliveryTerms] = None
    transport: Optional[TransportDetails] = None
    parties: List[Party] = Field(default_factory=list)
    dates: List[DateTimePeriod] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    amounts: List[MonetaryAmount] = Field(default_factory=list)
    allowances_charges: List[AllowanceCharge] = Field(default_factory=list)
    taxes: List[Tax] = Field(default_factory=list)
    free_text: List[FreeText] = Field(default_factory=list)
    line_items: List[OrderResponseLineItem] = Field(default_factory=list)
    control_totals: Optional[ControlTotals] = None


# ============================================================================
# DESADV
# ============================================================================

class DespatchLineItem(BaseModel):
    line_number: str = Field("", description="Line item number")
    product_ids: List[ProductIdentifier] = Field(default_factory=list)
    description: Optional[str] = None
    quantity: float = Field(0, description="Despatch quantity")
    unit: Optional[str] = Field(None, description="Unit of measure")
    order_reference: Optional[str] = None
    order_line_reference: Optional[str] = None
    batch_number: Optional[str] = Field(None, description="GIR BT/BX batch/lot number")
    serial_numbers: List[str] = Field(default_factory=list, description="GIR BN/SE serial numbers")


# Package/handling unit (CPS group)
class DespatchPackage(BaseModel):
    hierarchical_level: Optional[str] = Field(None, description="CPS hierarchical id")
    package_id: Optional[str] = Field(None, description="SSCC from PCI/GIN")
    package_type: Optional[str] = None
    number_of_packages: Optional[int] = None
    gross_weight: Optional[float] = Field(None, description="MEA AAB/WT value")
    weight_unit: Optional[str] = Field(None, description="KGM, LBR")
    measurements: List[Measurement] = Field(default_factory=list, description="Other MEA dimensions")
    items: List[DespatchLineItem] = Field(default_factory=list)


class OrderReference(BaseModel):
    order_number: str = ""


class DespatchControlTotals(BaseModel):
    line_item_count: Optional[float] = Field(None, description="CNT 2")
    package_count: Optional[float] = Field(None, description="CNT 7 / CNT 52")


class DesadvDocument(BaseModel):
    message_type: Literal["DESADV"] = "DESADV"
    message_reference_number: str = Field(..., description="UNH message reference number")
    message_function: Optional[str] = None
    despatch_number: str = Field("", description="BGM document number")
    despatch_date: str = Field("", description="DTM 137 document date")
    delivery_date: Optional[str] = Field(None, description="DTM 132 delivery date")
    parties: List[Party] = Field(default_factory=list)
    transport: Optional[TransportDetails] = None
    order_references: List[OrderReference] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    dates: List[DateTimePeriod] = Field(default_factory=list)
    packages: List[DespatchPackage] = Field(default_factory=list)
    line_items: List[DespatchLineItem] = Field(default_factory=list, description="Items outside any CPS group")
    control_totals: Optional[DespatchControlTotals] = None


# ============================================================================
# INVOIC
# ============================================================================

class InvoiceLineItem(BaseModel):
    line_number: str = ""
    product_ids: List[ProductIdentifier] = Field(default_factory=list)
    description: Optional[str] = None
    quantity: float = 0
    unit: Optional[str] = None
    unit_price: float = 0
    price_qualifier: Optional[str] = None
    line_amount: float = Field(0, description="MOA 203")
    order_reference: Optional[str] = None
    order_line_reference: Optional[str] = None
    despatch_reference: Optional[str] = None
    despatch_line_reference: Optional[str] = None
    allowances_charges: List[AllowanceCharge] = Field(default_factory=list)
    taxes: List[Tax] = Field(default_factory=list)
    amounts: List[MonetaryAmount] = Field(default_factory=list)
    free_text: List[FreeText] = Field(default_factory=list)


class PaymentInstructions(BaseModel):
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    bank_identifier: Optional[str] = None
    bank_name: Optional[str] = None


# Summary section MOA totals
class InvoiceTotals(BaseModel):
    line_items_total: Optional[float] = Field(None, description="MOA 79")
    total_allowances: Optional[float] = Field(None, description="MOA 131")
    total_charges: Optional[float] = Field(None, description="MOA 259")
    taxable_amount: Optional[float] = Field(None, description="MOA 125")
    total_tax_amount: Optional[float] = Field(None, description="MOA 176")
    invoice_total: Optional[float] = Field(None, description="MOA 86 / MOA 77, required for a valid invoice")
    amount_due: Optional[float] = Field(None, description="MOA 9")
    prepaid_amount: Optional[float] = Field(None, description="MOA 113")


class InvoicDocument(BaseModel):
    message_type: Literal["INVOIC"] = "INVOIC"
    message_reference_number: str = Field(..., description="UNH message reference number")
    message_function: Optional[str] = None
    invoice_number: str = Field("", description="BGM document number")
    invoice_date: str = Field("", description="DTM 137 document date")
    invoice_type: Optional[str] = Field(None, description="380=Commercial invoice, 381=Credit note, etc.")
    order_reference: Optional[str] = None
    despatch_reference: Optional[str] = None
    currency: str = ""
    payment_terms: Optional[PaymentTerms] = None
    payment_instructions: Optional[PaymentInstructions] = None
    parties: List[Party] = Field(default_factory=list)
    dates: List[DateTimePeriod] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    allowances_charges: List[AllowanceCharge] = Field(default_factory=list)
    taxes: List[Tax] = Field(default_factory=list)
    free_text: List[FreeText] = Field(default_factory=list)
    line_items: List[InvoiceLineItem] = Field(default_factory=list)
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)


# Tagged union of every document the dispatcher can return
EdifactDocument = Annotated[
    Union[OrdersDocument, OrdrspDocument, DesadvDocument, InvoicDocument],
    Field(discriminator="message_type"),
]
