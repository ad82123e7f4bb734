"""Truncating descriptions in a schema tree."""

from __future__ import annotations

from typing import Optional

from crdgen.apiext import JSONSchemaProps
from crdgen.visitor import SchemaVisitor, edit_schema

# Characters with the Unicode Sentence_Terminal property.
_SENTENCE_TERMINALS = frozenset(
    "!.?"
    "\u0589\u061e\u061f\u06d4\u0700\u0701\u0702\u07f9\u0837\u0839\u083d\u083e"
    "\u0964\u0965\u104a\u104b\u1362\u1367\u1368\u166e\u1735\u1736\u1803\u1809"
    "\u1944\u1945\u1aa8\u1aa9\u1aaa\u1aab\u1b5a\u1b5b\u1b5e\u1b5f\u1c3b\u1c3c"
    "\u1c7e\u1c7f\u203c\u203d\u2047\u2048\u2049\u2e2e\u2e3c\u3002\ua4ff\ua60e"
    "\ua60f\ua6f3\ua6f7\ua876\ua877\ua8ce\ua8cf\ua92f\ua9c8\ua9c9\uaa5d\uaa5e"
    "\uaa5f\uaaf0\uaaf1\uabeb\ufe52\ufe56\ufe57\uff01\uff0e\uff1f\uff61"
)


def truncate_description(schema: JSONSchemaProps, max_len: int) -> None:
    """Truncate descriptions in ``schema`` that exceed ``max_len``, in place.

    A ``max_len`` of 0 drops descriptions entirely; a negative value leaves
    the schema alone.
    """
    edit_schema(schema, _DescVisitor(max_len))


def truncate_string(desc: str, max_len: int) -> str:
    """Cut ``desc`` to ``max_len``, preferring the last sentence boundary."""
    desc = desc[:max_len]
    boundary = max(
        (index for index, char in enumerate(desc) if char in _SENTENCE_TERMINALS),
        default=-1,
    )
    if boundary > 0:
        return desc[: boundary + 1]
    return desc


class _DescVisitor(SchemaVisitor):
    def __init__(self, max_len: int) -> None:
        self.max_len = max_len

    def visit(self, schema: Optional[JSONSchemaProps]) -> Optional[SchemaVisitor]:
        if schema is None:
            return self
        if self.max_len < 0:
            return None
        if self.max_len == 0:
            schema.description = ""
        elif len(schema.description) > self.max_len:
            schema.description = truncate_string(schema.description, self.max_len)
        return self