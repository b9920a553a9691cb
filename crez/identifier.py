"""
Turn file names and resource keys into C identifiers.
"""

import os
import re
from typing import Union

_NOT_ALNUM = re.compile(rb'[^A-Za-z0-9]')


def sanitize(text: Union[str, bytes]) -> str:
    """Replace every byte that is not an ASCII letter or digit with '_'."""
    if isinstance(text, str):
        text = os.fsencode(text)
    return _NOT_ALNUM.sub(b'_', text).decode('ascii')


def make_identifier(text: Union[str, bytes], prefix: Union[str, bytes]) -> str:
    """
    Build the identifier `prefix_text`, both parts sanitized.

    Example: make_identifier("assets/sprites.png", "game") -> "game_assets_sprites_png"
    """
    identifier = f"{sanitize(prefix)}_{sanitize(text)}"
    # C identifiers cannot start with a digit
    if identifier[0].isdigit():
        identifier = '_' + identifier
    return identifier
