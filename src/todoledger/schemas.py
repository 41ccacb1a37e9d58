"""Typed schemas for todoledger.

An Entry is the only value the list store holds. Positions are not part of
an Entry: they are transient slot addresses that shift on removal.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Entry(BaseModel):
    """One to-do record."""

    model_config = ConfigDict(frozen=True)

    text: str
    completed: bool = False


def encode_text(text: str) -> bytes:
    """Encode entry text for storage.

    ``surrogatepass`` keeps lone surrogates, which are valid in a Python
    ``str`` but not in UTF-8, so any ``str`` can be stored and read back.
    """
    return text.encode("utf-8", "surrogatepass")


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", "surrogatepass")
