from __future__ import annotations

from typing import Any, TypedDict


class KeywordFields(TypedDict, total=False):
    translation: str
    context: str
    reference: str
    comment: str
    createdAt: str
    updatedAt: str


class KeywordRecord(TypedDict):
    # The API may add keys to `data`; records are passed through untouched.
    id: str
    data: KeywordFields | dict[str, Any]
