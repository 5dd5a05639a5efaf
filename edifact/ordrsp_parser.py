"""
ORDRSP (purchase order response) message parser.
"""
from typing import Optional
from edifact import decoders
from edifact.base_parser import ParseState
from edifact.orders_parser import OrdersParser
from utils.constants import REFERENCE_ORDER, LINE_STATUS_BY_ACTION
from utils.schemas import OrdrspDocument, OrderResponseLineItem


class OrdrspParser(OrdersParser):

    message_type = "ORDRSP"
    document_class = OrdrspDocument
    line_item_class = OrderResponseLineItem
    number_field = "response_number"
    date_field = "response_date"

    def _new_line_item(self, state: ParseState):
        line = decoders.decode_LIN(state.segment)
        return self.line_item_class(
            status=LINE_STATUS_BY_ACTION.get(line["action_code"]),
            **line
        )

    def _handle_BGM(self, state: ParseState) -> Optional[int]:
        bgm = decoders.decode_BGM(state.segment)
        state.document.response_type = bgm["document_name_code"]
        state.document.response_number = bgm["document_number"]
        self._set_message_function(state, bgm["message_function"])
        return None

    def _add_header_reference(self, state: ParseState, rff):
        state.document.references.append(rff)
        if rff.qualifier == REFERENCE_ORDER:
            state.document.order_reference = rff.number or ""
