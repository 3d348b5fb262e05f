"""JSON messages exchanged with front ends.

Inbound:  {"action": "volume_up"}
Outbound: {"main_volume": 32, "input": 3, "standby": false,
           "input_1_effect": 20, "input_2_effect": 22, "input_6_effect": 53}
"""
from __future__ import annotations

import json
from typing import Union

from ..errors import AmpError, UnknownAction
from ..models import Action, Status


def parse_action_message(text: Union[str, bytes]) -> Action:
    """Parse an inbound action message.

    Raises:
        UnknownAction: If the message is not valid JSON, has no string
            `action` field, or names an unknown action
    """
    try:
        if isinstance(text, bytes):
            text = text.decode('utf-8')
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise UnknownAction(f"Malformed action message: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("action"), str):
        raise UnknownAction("Action message has no 'action' field")

    return Action.parse(data["action"])


def encode_status(status: Status) -> str:
    """Serialize a status snapshot for front ends."""
    return json.dumps(status.to_dict())


def decode_status(text: Union[str, bytes]) -> Status:
    """Load a status snapshot sent by encode_status."""
    return Status.from_dict(json.loads(text))


def encode_error(error: AmpError) -> str:
    """Serialize an error reply naming the error type."""
    return json.dumps({
        "error": type(error).__name__,
        "message": str(error),
    })
