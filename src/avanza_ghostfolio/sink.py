"""Clipboard output with console fallback."""

from __future__ import annotations

import logging
from typing import Callable

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(
    text: str,
    clipboard: Callable[[str], None] | None = None,
) -> bool:
    """Hand text to the clipboard, printing it when the clipboard is unavailable.

    :param text: Text to copy.
    :param clipboard: Clipboard writer (pyperclip by default).
    :returns: True if the text reached the clipboard.
    """
    if clipboard is None:
        clipboard = pyperclip.copy
    try:
        clipboard(text)
    except pyperclip.PyperclipException as e:
        logger.warning("Clipboard unavailable: %s", e)
        print(f"Failed to copy to clipboard: {e}")
        print(text)
        return False

    print("Copied to clipboard")
    return True
