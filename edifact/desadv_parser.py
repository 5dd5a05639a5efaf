"""
DESADV (despatch advice / ship notice) message parser.

Packaging hierarchy: CPS opens a package, LIN opens a line item inside the
open package. Without any CPS the line items land in the flat
DesadvDocument.line_items list.
"""
import logging
from typing import Optional
from edifact import decoders
from edifact.base_parser import BaseMessageParser, ParseState
from edifact.context import DETAIL
from edifact.segments import element
from utils.constants import (
    DATE_DOCUMENT, DATE_DELIVERY, REFERENCE_ORDER, COUNT_LINE_ITEMS, COUNT_PACKAGES,
    GROSS_WEIGHT_DIMENSIONS
)
from utils.schemas import (
    Message, DesadvDocument, DespatchPackage, DespatchLineItem, DespatchControlTotals, OrderReference
)

LOGGER = logging.getLogger(__name__)


class DesadvParser(BaseMessageParser):

    message_type = "DESADV"

    def _new_document(self, message: Message):
        return DesadvDocument(
            message_reference_number=message.header.message_reference_number,
            message_function=message.header.message_function,
        )

    def _declare_levels(self, state: ParseState):
        document = state.document
        context = state.context

        def flush_line_item(line: DespatchLineItem):
            package = context.current("package")
            if package is not None:
                package.items.append(line)
            else:
                document.line_items.append(line)

        context.add_level("party", document.parties.append)
        context.add_level("package", document.packages.append)
        context.add_level("line_item", flush_line_item, parent="package")

    # ========================================================================
    # Header segments
    # ========================================================================

    def _handle_BGM(self, state: ParseState) -> Optional[int]:
        bgm = decoders.decode_BGM(state.segment)
        state.document.despatch_number = bgm["document_number"]
        self._set_message_function(state, bgm["message_function"])
        return None

    def _handle_DTM(self, state: ParseState) -> Optional[int]:
        dtm = decoders.decode_DTM(state.segment)
        state.document.dates.append(dtm)
        if dtm.qualifier == DATE_DOCUMENT:
            state.document.despatch_date = decoders.format_date(dtm.value, dtm.format_qualifier)
        elif dtm.qualifier == DATE_DELIVERY:
            state.document.delivery_date = decoders.format_date(dtm.value, dtm.format_qualifier)
        return None

    def _handle_RFF(self, state: ParseState) -> Optional[int]:
        rff = decoders.decode_RFF(state.segment)
        state.document.references.append(rff)
        if rff.qualifier != REFERENCE_ORDER:
            return None

        state.document.order_references.append(OrderReference(order_number=rff.number or ""))
        line = state.context.current("line_item")
        if line is not None:
            line.order_reference = rff.number
            line.order_line_reference = rff.line_number
        return None

    def _handle_TDT(self, state: ParseState) -> Optional[int]:
        state.document.transport = decoders.decode_TDT(state.segment)
        return None

    # ========================================================================
    # Packaging (CPS group)
    # ========================================================================

    def _handle_CPS(self, state: ParseState) -> Optional[int]:
        state.context.section = DETAIL
        state.context.open("package", DespatchPackage(hierarchical_level=element(state.segment, 1)))
        return None

    def _handle_PAC(self, state: ParseState) -> Optional[int]:
        package = state.context.current("package")
        if package is not None:
            pac = decoders.decode_PAC(state.segment)
            package.number_of_packages = pac.number_of_packages
            package.package_type = pac.package_type
        return None

    def _handle_PCI(self, state: ParseState) -> Optional[int]:
        return self._set_package_id(state)

    def _handle_GIN(self, state: ParseState) -> Optional[int]:
        return self._set_package_id(state)

    def _set_package_id(self, state: ParseState) -> Optional[int]:
        package = state.context.current("package")
        package_id = decoders.decode_package_id(state.segment)
        if package is not None and package_id:
            package.package_id = package_id
        return None

    def _handle_MEA(self, state: ParseState) -> Optional[int]:
        package = state.context.current("package")
        if package is None:
            return None
        mea = decoders.decode_MEA(state.segment)
        if mea.dimension in GROSS_WEIGHT_DIMENSIONS:
            package.gross_weight = mea.value
            package.weight_unit = mea.unit
        elif mea.dimension:
            package.measurements.append(mea)
        return None

    # ========================================================================
    # Line items
    # ========================================================================

    def _handle_LIN(self, state: ParseState) -> Optional[int]:
        state.context.section = DETAIL
        lin = decoders.decode_LIN(state.segment)
        state.context.open("line_item", DespatchLineItem(
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
            description = decoders.decode_IMD(state.segment, use_code=False)
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

    def _handle_GIR(self, state: ParseState) -> Optional[int]:
        line = state.context.current("line_item")
        if line is None:
            return None
        gir = decoders.decode_GIR(state.segment)
        if gir["batch_number"]:
            line.batch_number = gir["batch_number"]
        line.serial_numbers.extend(gir["serial_numbers"])
        return None

    # ========================================================================
    # Summary section
    # ========================================================================

    def _handle_CNT(self, state: ParseState) -> Optional[int]:
        cnt = decoders.decode_CNT(state.segment)
        if cnt["qualifier"] == COUNT_LINE_ITEMS:
            self._control_totals(state).line_item_count = cnt["value"]
        elif cnt["qualifier"] in COUNT_PACKAGES:
            self._control_totals(state).package_count = cnt["value"]
        else:
            LOGGER.debug(f"CNT qualifier {cnt['qualifier']} not mapped, ignored")
        return None

    def _control_totals(self, state: ParseState) -> DespatchControlTotals:
        if state.document.control_totals is None:
            state.document.control_totals = DespatchControlTotals()
        return state.document.control_totals
