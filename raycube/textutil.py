"""Small text helpers used while reading scene description files."""

from __future__ import annotations

import os
from typing import Union

_BLANK = " \t\n"


def split(text: str, sep: str) -> list[str]:
    """Split on ``sep``, dropping the empty pieces between repeated separators."""
    return [piece for piece in text.split(sep) if piece]


def trim_spaces(text: str) -> str:
    """Drop leading spaces and trailing spaces and newlines."""
    return text.lstrip(" ").rstrip(" \n")


def erase_key(text: str) -> str:
    """Return what follows the first space-separated word, without its leading spaces."""
    rest = text.lstrip(" ")
    _, _, value = rest.partition(" ")
    return value.lstrip(" ")


def parse_uint(text: str) -> int:
    """Parse an unsigned decimal number surrounded by optional spaces.

    Trailing newlines are also allowed. Signs and any other characters
    make the text invalid and raise ValueError.
    """
    body = text.lstrip(" ")
    digits_end = 0
    while digits_end < len(body) and "0" <= body[digits_end] <= "9":
        digits_end += 1
    if digits_end == 0:
        raise ValueError(f"not an unsigned number: {text!r}")
    if body[digits_end:].strip(" \n"):
        raise ValueError(f"trailing characters in number: {text!r}")
    return int(body[:digits_end])


def is_blank(text: str) -> bool:
    """True if the text holds only spaces, tabs and newlines."""
    return all(ch in _BLANK for ch in text)


def read_lines(path: Union[str, os.PathLike]) -> list[str]:
    """Read a file as lines split on newline, each keeping its terminator."""
    with open(path, encoding="utf-8", newline="\n") as handle:
        return list(handle)