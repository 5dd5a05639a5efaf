"""
INVOIC (invoice) message parser.

Totals come only from summary-section MOA segments; nothing is derived. A
missing invoice total is left as None for the caller to reject.
"""
import logging
from typing import Optional
from edifact import decoders
from edifact.base_parser import BaseMessageParser, ParseState
from edifact.context import HEADER, DETAIL, SUMMARY, read_allowance_charge, read_tax
from utils.constants import (
    DATE_DOCUMENT, REFERENCE_ORDER, REFERENCE_DESPATCH, AMOUNT_LINE_ITEM, INVOICE_TOTALS_MAP
)
from utils.schemas import Message, InvoicDocument, InvoiceLineItem

LOGGER = logging.getLogger(__name__)


class InvoicParser(BaseMessageParser):

    message_type = "INVOIC"

    def _new_document(self, message: Message):
        return InvoicDocument(
            message_reference_number=message.header.message_reference_number,
            message_function=message.header.message_function,
        )

    def _declare_levels(self, state: ParseState):
        state.context.add_level("party", state.document.parties.append)
        state.context.add_level("line_item", state.document.line_items.append)

    # ========================================================================
    # Header segments
    # ========================================================================

    def _handle_BGM(self, state: ParseState) -> Optional[int]:
        bgm = decoders.decode_BGM(state.segment)
        state.document.invoice_type = bgm["document_name_code"]
        state.document.invoice_number = bgm["document_number"]
        self._set_message_function(state, bgm["message_function"])
        return None

    def _handle_DTM(self, state: ParseState) -> Optional[int]:
        if state.context.section != HEADER:
            return None
        dtm = decoders.decode_DTM(state.segment)
        state.document.dates.append(dtm)
        if dtm.qualifier == DATE_DOCUMENT:
            state.document.invoice_date = decoders.format_date(dtm.value, dtm.format_qualifier)
        return None

    def _handle_FTX(self, state: ParseState) -> Optional[int]:
        ftx = decoders.decode_FTX(state.segment)
        line = state.context.current("line_item")
        if line is not None:
            line.free_text.append(ftx)
        elif state.context.section == HEADER:
            state.document.free_text.append(ftx)
        return None

    def _handle_RFF(self, state: ParseState) -> Optional[int]:
        rff = decoders.decode_RFF(state.segment)
        line = state.context.current("line_item")
        if line is not None:
            # Line references point back at the order and despatch advice lines
            if rff.qualifier == REFERENCE_ORDER:
                line.order_reference = rff.number
                line.order_line_reference = rff.line_number
            elif rff.qualifier == REFERENCE_DESPATCH:
                line.despatch_reference = rff.number
                line.despatch_line_reference = rff.line_number
            return None
        if state.context.section != HEADER:
            return None

        party = state.context.current("party")
        if party is not None:
            party.references.append(rff)
            return None
        state.document.references.append(rff)
        if rff.qualifier == REFERENCE_ORDER:
            state.document.order_reference = rff.number
        elif rff.qualifier == REFERENCE_DESPATCH:
            state.document.despatch_reference = rff.number
        return None

    def _handle_CUX(self, state: ParseState) -> Optional[int]:
        state.document.currency = decoders.decode_CUX(state.segment) or ""
        return None

    def _handle_PAT(self, state: ParseState) -> Optional[int]:
        state.document.payment_terms = decoders.decode_PAT(state.segment)
        return None

    def _handle_FII(self, state: ParseState) -> Optional[int]:
        state.document.payment_instructions = decoders.merge_payment_instructions(
            state.document.payment_instructions, decoders.decode_FII(state.segment)
        )
        return None

    # ========================================================================
    # Grouped segments (ALC+PCD/MOA, TAX+MOA)
    # ========================================================================

    def _handle_ALC(self, state: ParseState) -> Optional[int]:
        allowance, next_index = read_allowance_charge(state.segments, state.index)
        owner = self._group_owner(state)
        if owner is not None:
            owner.allowances_charges.append(allowance)
        return next_index

    def _handle_TAX(self, state: ParseState) -> Optional[int]:
        tax, next_index = read_tax(state.segments, state.index)
        owner = self._group_owner(state)
        if owner is not None:
            owner.taxes.append(tax)
        return next_index

    def _group_owner(self, state: ParseState):
        if state.context.section == DETAIL:
            return state.context.current("line_item")
        return state.document

    # ========================================================================
    # Line items
    # ========================================================================

    def _handle_LIN(self, state: ParseState) -> Optional[int]:
        state.context.section = DETAIL
        state.context.close("party")
        lin = decoders.decode_LIN(state.segment)
        state.context.open("line_item", InvoiceLineItem(
            line_number=lin["line_number"],
            product_ids=lin["product_ids"],
        ))
        return None

    def _handle_PIA(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            line.product_ids.extend(decoders.decode_PIA(state.segment))
        return None

    def _handle_IMD(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            description = decoders.decode_IMD(state.segment)
            if description:
                line.description = description
        return None

    def _handle_QTY(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            qty = decoders.decode_QTY(state.segment)
            line.quantity = qty.quantity
            line.unit = qty.unit
        return None

    def _handle_PRI(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            pri = decoders.decode_PRI(state.segment)
            line.unit_price = pri.amount
            line.price_qualifier = pri.qualifier
        return None

    def _handle_MOA(self, state: ParseState) -> Optional[int]:
        moa = decoders.decode_MOA(state.segment)
        section = state.context.section
        line = state.context.current("line_item")

        if section == DETAIL and line is not None:
            if moa.type_qualifier == AMOUNT_LINE_ITEM:
                line.line_amount = moa.amount
            else:
                line.amounts.append(moa)
        elif section == SUMMARY:
            field = INVOICE_TOTALS_MAP.get(moa.type_qualifier)
            if field:
                setattr(state.document.totals, field, moa.amount)
            else:
                LOGGER.debug(f"Summary MOA qualifier {moa.type_qualifier} not mapped, ignored")
        return None

    # ========================================================================
    # Summary section
    # ========================================================================

    def _handle_UNS(self, state: ParseState) -> Optional[int]:
        state.context.close("line_item")
        state.context.section = SUMMARY
        return None
