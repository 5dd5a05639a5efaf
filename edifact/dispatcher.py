"""
Selects the message parser for a message's declared type.
"""
import logging
from typing import Optional
from edifact.orders_parser import OrdersParser
from edifact.ordrsp_parser import OrdrspParser
from edifact.desadv_parser import DesadvParser
from edifact.invoic_parser import InvoicParser
from edifact.exceptions import UnsupportedMessageType
from utils.schemas import Message, EdifactDocument

LOGGER = logging.getLogger(__name__)


class MessageDispatcher:
    """Routes a tokenized message to the ORDERS, ORDRSP, DESADV or INVOIC parser."""

    def __init__(self):
        self.parsers = {
            "ORDERS": OrdersParser(),
            "ORDRSP": OrdrspParser(),
            "DESADV": DesadvParser(),
            "INVOIC": InvoicParser(),
        }

    def parse(self, message: Message, message_type: Optional[str] = None) -> EdifactDocument:
        """
        Parse one message into its typed document.

        Args:
            message: Tokenized message (UNH header + segments)
            message_type: Declared type; defaults to the type in the UNH header

        Returns:
            OrdersDocument, OrdrspDocument, DesadvDocument or InvoicDocument

        Raises:
            UnsupportedMessageType: for any other message type
        """
        if message_type is None:
            message_type = message.header.message_type

        parser = self.parsers.get(message_type)
        if parser is None:
            raise UnsupportedMessageType(message_type)

        LOGGER.info(f"Parsing {message_type} message {message.header.message_reference_number} with {len(message.segments)} segments")
        return parser.parse(message)


_dispatcher = MessageDispatcher()


def parse_message(message: Message, message_type: Optional[str] = None) -> EdifactDocument:
    return _dispatcher.parse(message, message_type)
