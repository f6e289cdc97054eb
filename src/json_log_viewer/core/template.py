"""Format template parsing."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .models import CustomFieldToken, FieldToken, FormatToken, Role, TextToken

_TEMPLATE_ROLES = {
    "level": Role.LEVEL,
    "timestamp": Role.TIMESTAMP,
    "logger": Role.LOGGER,
    "message": Role.MESSAGE,
}


def parse_template(template: str) -> list[FormatToken]:
    """Parse a template into tokens.

    ``{name}`` is a placeholder, ``{{`` and ``}}`` are literal braces. An
    unterminated ``{`` takes the rest of the template as the field name.
    """
    tokens: list[FormatToken] = []
    literal: list[str] = []
    i, n = 0, len(template)

    while i < n:
        ch = template[i]
        if ch == "{":
            if template.startswith("{", i + 1):
                literal.append("{")
                i += 2
                continue
            if literal:
                tokens.append(TextToken("".join(literal)))
                literal = []
            end = template.find("}", i + 1)
            if end == -1:
                end = n
            name = template[i + 1 : end]
            role = _TEMPLATE_ROLES.get(name)
            tokens.append(FieldToken(role) if role is not None else CustomFieldToken(name))
            i = end + 1
        elif ch == "}" and template.startswith("}", i + 1):
            literal.append("}")
            i += 2
        else:
            literal.append(ch)
            i += 1

    if literal:
        tokens.append(TextToken("".join(literal)))
    return tokens


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Per-run field sets, computed once from options and template tokens."""

    omit_fields: frozenset[str] = frozenset()
    add_fields: frozenset[str] = frozenset()
    template_custom_fields: frozenset[str] = frozenset()

    @classmethod
    def build(
        cls,
        tokens: Sequence[FormatToken],
        *,
        add_fields: Iterable[str] = (),
        omit_fields: Iterable[str] = (),
    ) -> RenderContext:
        return cls(
            omit_fields=frozenset(omit_fields),
            add_fields=frozenset(add_fields),
            template_custom_fields=frozenset(
                t.name for t in tokens if isinstance(t, CustomFieldToken)
            ),
        )
