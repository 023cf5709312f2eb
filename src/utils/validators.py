"""Shared validators and base schemas."""

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_ETH_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")
_EXPO_PUSH_TOKEN = re.compile(r"^(ExponentPushToken|ExpoPushToken)\[.+\]$")


class CamelModel(BaseModel):
    """Snake_case fields in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def is_eth_address(value: str) -> bool:
    return bool(_ETH_ADDRESS.match(value))


def is_expo_push_token(value: str | None) -> bool:
    if not value:
        return False
    return bool(_EXPO_PUSH_TOKEN.match(value))
