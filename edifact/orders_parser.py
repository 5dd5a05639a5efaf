"""
ORDERS (purchase order) message parser.
Also the base for ORDRSP, which shares the line item layout.
"""
import logging
from typing import Optional
from edifact import decoders
from edifact.base_parser import BaseMessageParser, ParseState
from edifact.context import DETAIL, SUMMARY
from utils.constants import DATE_DOCUMENT, COUNT_LINE_ITEMS, COUNT_TOTAL_AMOUNT
from utils.schemas import Message, OrdersDocument, OrderLineItem, ControlTotals

LOGGER = logging.getLogger(__name__)


class OrdersParser(BaseMessageParser):
    """Builds an OrdersDocument from the segments of one ORDERS message."""

    message_type = "ORDERS"
    document_class = OrdersDocument
    line_item_class = OrderLineItem
    # Named document fields filled from BGM / DTM 137
    number_field = "order_number"
    date_field = "order_date"

    def _new_document(self, message: Message):
        return self.document_class(
            message_reference_number=message.header.message_reference_number,
            message_function=message.header.message_function,
        )

    def _declare_levels(self, state: ParseState):
        document = state.document
        state.context.add_level("party", document.parties.append)
        state.context.add_level("line_item", document.line_items.append)

    def _new_line_item(self, state: ParseState):
        return self.line_item_class(**decoders.decode_LIN(state.segment))

    # ========================================================================
    # Header segments
    # ========================================================================

    def _handle_BGM(self, state: ParseState) -> Optional[int]:
        bgm = decoders.decode_BGM(state.segment)
        state.document.document_type_code = bgm["document_name_code"]
        setattr(state.document, self.number_field, bgm["document_number"])
        self._set_message_function(state, bgm["message_function"])
        return None

    def _handle_DTM(self, state: ParseState) -> Optional[int]:
        dtm = decoders.decode_DTM(state.segment)
        line = state.context.current("line_item")
        if line is not None:
            line.dates.append(dtm)
            return None
        state.document.dates.append(dtm)
        if dtm.qualifier == DATE_DOCUMENT:
            setattr(state.document, self.date_field, decoders.format_date(dtm.value, dtm.format_qualifier))
        return None

    def _handle_FTX(self, state: ParseState) -> Optional[int]:
        ftx = decoders.decode_FTX(state.segment)
        line = state.context.current("line_item")
        if line is not None:
            line.additional_description.append(ftx)
        else:
            state.document.free_text.append(ftx)
        return None

    def _handle_RFF(self, state: ParseState) -> Optional[int]:
        rff = decoders.decode_RFF(state.segment)
        owner = state.context.innermost("line_item", "party")
        if owner is not None:
            owner.references.append(rff)
        else:
            self._add_header_reference(state, rff)
        return None

    def _add_header_reference(self, state: ParseState, rff):
        state.document.references.append(rff)

    def _handle_CUX(self, state: ParseState) -> Optional[int]:
        state.document.currency = decoders.decode_CUX(state.segment)
        return None

    def _handle_PAT(self, state: ParseState) -> Optional[int]:
        state.document.payment_terms = decoders.decode_PAT(state.segment)
        return None

    def _handle_TOD(self, state: ParseState) -> Optional[int]:
        state.document.delivery_terms = decoders.decode_TOD(state.segment)
        return None

    def _handle_TDT(self, state: ParseState) -> Optional[int]:
        state.document.transport = decoders.decode_TDT(state.segment)
        return None

    # ========================================================================
    # Segments valid at header and line level
    # ========================================================================

    def _handle_ALC(self, state: ParseState) -> Optional[int]:
        alc = decoders.decode_ALC(state.segment)
        self._line_or_document(state).allowances_charges.append(alc)
        return None

    def _handle_TAX(self, state: ParseState) -> Optional[int]:
        tax = decoders.decode_TAX(state.segment)
        self._line_or_document(state).taxes.append(tax)
        return None

    def _handle_MOA(self, state: ParseState) -> Optional[int]:
        moa = decoders.decode_MOA(state.segment)
        self._line_or_document(state).amounts.append(moa)
        return None

    # ========================================================================
    # Line items
    # ========================================================================

    def _handle_LIN(self, state: ParseState) -> Optional[int]:
        state.context.section = DETAIL
        # Parties belong to the header section
        state.context.close("party")
        state.context.open("line_item", self._new_line_item(state))
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
            line.quantities.append(decoders.decode_QTY(state.segment))
        return None

    def _handle_PRI(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            line.prices.append(decoders.decode_PRI(state.segment))
        return None

    def _handle_PAC(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is not None:
            line.packages.append(decoders.decode_PAC(state.segment))
        return None

    # ========================================================================
    # Summary section
    # ========================================================================

    def _handle_UNS(self, state: ParseState) -> Optional[int]:
        state.context.close("line_item")
        state.context.section = SUMMARY
        return None

    def _handle_CNT(self, state: ParseState) -> Optional[int]:
        cnt = decoders.decode_CNT(state.segment)
        if cnt["qualifier"] == COUNT_LINE_ITEMS:
            self._control_totals(state).line_item_count = cnt["value"]
        elif cnt["qualifier"] == COUNT_TOTAL_AMOUNT:
            self._control_totals(state).total_amount = cnt["value"]
        else:
            LOGGER.debug(f"CNT qualifier {cnt['qualifier']} not mapped, ignored")
        return None

    def _control_totals(self, state: ParseState) -> ControlTotals:
        if state.document.control_totals is None:
            state.document.control_totals = ControlTotals()
        return state.document.control_totals

    def _line_or_document(self, state: ParseState):
        line = state.context.current("line_item")
        return line if line is not None else state.document
