"""
Single forward pass over a message's segments.
Subclasses declare their hierarchy levels and one `_handle_<TAG>` method per segment tag they understand.
"""
import logging
from typing import List, Optional
from edifact import decoders
from edifact.context import HierarchyContext, read_contact
from utils.schemas import Message, Segment

LOGGER = logging.getLogger(__name__)


class ParseState:
    """Everything one parse call mutates. Parsers themselves hold no per-message state."""

    def __init__(self, document, segments: List[Segment]):
        self.document = document
        self.segments = segments
        self.index = 0
        self.context = HierarchyContext()

    @property
    def segment(self) -> Segment:
        return self.segments[self.index]


class BaseMessageParser:
    """Walks the segment stream once and hands each segment to its handler."""

    message_type: str = ""

    def __init__(self):
        prefix = "_handle_"
        self._handlers = {
            name[len(prefix):]: getattr(self, name)
            for name in dir(self)
            if name.startswith(prefix)
        }

    def parse(self, message: Message):
        state = ParseState(self._new_document(message), message.segments)
        self._declare_levels(state)

        skipped = set()
        while state.index < len(state.segments):
            tag = state.segment.tag
            handler = self._handlers.get(tag)
            if handler is None:
                skipped.add(tag)
                state.index += 1
                continue
            next_index = handler(state)
            state.index = next_index if next_index is not None else state.index + 1

        state.context.close_all()

        LOGGER.debug(f"{self.message_type} {message.header.message_reference_number}: {len(state.segments)} segments")
        if skipped:
            LOGGER.debug(f"{self.message_type} {message.header.message_reference_number}: ignored segments {sorted(skipped)}")
        return state.document

    # ========================================================================
    # Hooks
    # ========================================================================

    def _new_document(self, message: Message):
        raise NotImplementedError

    def _declare_levels(self, state: ParseState):
        raise NotImplementedError

    # ========================================================================
    # Handlers shared by every message type
    # ========================================================================

    def _handle_NAD(self, state: ParseState) -> Optional[int]:
        state.context.open("party", decoders.decode_NAD(state.segment))
        return None

    def _handle_CTA(self, state: ParseState) -> Optional[int]:
        contact, next_index = read_contact(state.segments, state.index)
        party = state.context.current("party")
        if party is not None:
            party.contacts.append(contact)
        else:
            LOGGER.debug(f"CTA {contact.function_code} outside a party group, dropped")
        return next_index

    def _set_message_function(self, state: ParseState, message_function: Optional[str]):
        if message_function:
            state.document.message_function = message_function
