from dotenv import load_dotenv
load_dotenv()
import argparse
import logging
import sys
import traceback
from typing import Optional

from pydantic import ValidationError

from edifact.dispatcher import MessageDispatcher
from edifact.exceptions import UnsupportedMessageType, MessageTooLarge
from utils.config import settings
from utils.schemas import Message


LOGGER = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(filename=settings.LOG_FILE,
                        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
                        format='%(asctime)s %(levelname)s %(message)s',
                        datefmt='%m-%d %H:%M:%S')


def load_message(path: str) -> Message:
    with open(path, encoding="utf-8") as f:
        return Message.model_validate_json(f.read())


def check_size(message: Message, limit: Optional[int] = None):
    """Reject implausibly large messages before dispatch."""
    limit = settings.MAX_SEGMENTS if limit is None else limit
    if len(message.segments) > limit:
        raise MessageTooLarge(len(message.segments), limit)


def convert_message(path: str, message_type: str = None, indent: int = None) -> str:
    message = load_message(path)
    check_size(message)
    document = MessageDispatcher().parse(message, message_type)
    return document.model_dump_json(indent=indent)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.APP_NAME,
        description="Convert a tokenized EDIFACT message (JSON) into a typed ORDERS/ORDRSP/DESADV/INVOIC document.",
    )
    parser.add_argument("message", help="Path to the tokenized message JSON file")
    parser.add_argument("--type", dest="message_type", default=None,
                        help="Declared message type (defaults to the UNH message type)")
    parser.add_argument("--indent", type=int, default=None, help="Indent the JSON output")
    return parser


def main(argv=None) -> int:
    configure_logging()
    args = build_arg_parser().parse_args(argv)
    try:
        LOGGER.info(f"Converting {args.message}")
        print(convert_message(args.message, args.message_type, args.indent))
        return 0
    except UnsupportedMessageType as e:
        LOGGER.error(f"Error converting {args.message}: {str(e)}")
        return 2
    except (MessageTooLarge, ValidationError, UnicodeDecodeError, OSError) as e:
        LOGGER.error(f"Error converting {args.message}: {str(e)}\nTraceback: {traceback.format_exc()}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
