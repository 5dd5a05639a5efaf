"""
Shared builders for the EDIFACT test suites.
Elements are given the way the tokenizer reports them: a string for a simple
element, a list of strings for a composite.
"""
import pytest
from utils.schemas import Segment, Message, MessageHeader


def build_segment(tag, *elements):
    return Segment(tag=tag, elements=list(elements))


def build_message(message_type, segments, reference="ME0001", message_function=None):
    header = MessageHeader(
        message_reference_number=reference,
        message_type=message_type,
        version="D",
        release="96A",
        controlling_agency="UN",
        message_function=message_function,
    )
    return Message(header=header, segments=segments)


@pytest.fixture
def seg():
    return build_segment


@pytest.fixture
def make_message():
    return build_message
