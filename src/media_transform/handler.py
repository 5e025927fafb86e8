"""AWS Lambda entry point."""

import json
from typing import Any, Dict, Optional

from .core.factories import HandlerFactory
from .core.logging_config import clear_request_id, get_logger, set_request_id
from .core.services import MediaRequestHandler

_handler: Optional[MediaRequestHandler] = None


def get_handler() -> MediaRequestHandler:
    """Build the handler once per process; warm invocations reuse it."""
    global _handler
    if _handler is None:
        _handler = HandlerFactory.create_handler()
    return _handler


def reset_handler() -> None:
    global _handler
    _handler = None


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Lambda handler for API Gateway proxy events."""
    request_id = getattr(context, "aws_request_id", None)
    set_request_id(request_id)
    try:
        logger = get_logger("media-transform.handler")
        logger.debug(f"Event: {json.dumps(event, default=str)}")
        return get_handler().handle(event, request_id=request_id)
    finally:
        clear_request_id()
