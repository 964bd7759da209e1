"""Rebuild the literal SQL that a parameterized statement logically executed.

The output exists for logs and diagnostics. It is never parsed again or sent
to the database.
"""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final, Optional

from mypy_extensions import mypyc_attr

from sqlstats.parameters.quoting import fallback_quote
from sqlstats.parameters.types import NAMED_MARKER, BoundParameter, ParameterType

if TYPE_CHECKING:
    from sqlstats.protocols import QuoterProtocol

__all__ = ("QueryInterpolator", "interpolate_query", "render_literal")


# Literals and comments are matched first so placeholders inside them are skipped
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^'\\]|\\.)*') |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>\w*)?\$[\s\S]*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    # PostgreSQL JSON operators ??, ?|, ?& and ::type casts look like placeholders
    (?P<pg_q_operator>\?\?|\?\||\?&) |
    (?P<pg_cast>::\w+) |
    (?P<named_colon>:(?P<colon_name>\w+)) |
    (?P<qmark>\?)
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


def render_literal(bound: BoundParameter, quoter: "Optional[QuoterProtocol]" = None) -> str:
    """Literal SQL text for one binding.

    Args:
        bound: The binding to render.
        quoter: Driver quoting primitive. Without one, values are wrapped in
            single quotes with backslash escaping.

    Returns:
        ``NULL``, a bare integer, or a quoted literal.
    """
    value = bound.current_value()
    if value is None or bound.param_type is ParameterType.NULL:
        return "NULL"
    if bound.param_type is ParameterType.INTEGER:
        try:
            return str(int(value))
        except (TypeError, ValueError, OverflowError):
            param_type = ParameterType.STRING
        else:
            param_type = bound.param_type
    else:
        param_type = bound.param_type
    if quoter is not None:
        return quoter.quote(value, param_type)
    return fallback_quote(value)


@mypyc_attr(allow_interpreted_subclasses=True)
class QueryInterpolator:
    """Substitutes bound values into a statement template."""

    __slots__ = ("quoter",)

    def __init__(self, quoter: "Optional[QuoterProtocol]" = None) -> None:
        self.quoter = quoter

    def interpolate(self, template: str, bindings: Mapping[str, BoundParameter]) -> str:
        """Return ``template`` with every bound placeholder replaced by its literal.

        Positional bindings (numeric keys) fill ``?`` markers in template order,
        ordered by their integer key. Named bindings replace every ``:name``
        marker of the same name. Markers without a binding are left untouched.
        """
        if not bindings:
            return template

        positional: list[str] = []
        named: dict[str, str] = {}
        # Bindings arrive oldest first, so ":id" and "id" resolve to whichever was bound last
        for bound in bindings.values():
            if not bound.is_positional and bound.name:
                named[bound.name] = render_literal(bound, self.quoter)
        for key in sorted((k for k in bindings if bindings[k].is_positional), key=int):
            positional.append(render_literal(bindings[key], self.quoter))

        pieces: list[str] = []
        last = 0
        next_positional = 0
        for match in _PLACEHOLDER_REGEX.finditer(template):
            kind = match.lastgroup
            if kind == "qmark":
                if next_positional >= len(positional):
                    continue
                literal = positional[next_positional]
                next_positional += 1
            elif kind == "named_colon":
                literal_or_none = named.get(match.group("colon_name"))
                if literal_or_none is None:
                    continue
                literal = literal_or_none
            else:
                continue
            pieces.append(template[last : match.start()])
            pieces.append(literal)
            last = match.end()
        if not pieces:
            return template
        pieces.append(template[last:])
        return "".join(pieces)


def interpolate_query(
    template: str, bindings: Mapping[str, BoundParameter], quoter: "Optional[QuoterProtocol]" = None
) -> str:
    """Convenience wrapper around :class:`QueryInterpolator`."""
    return QueryInterpolator(quoter).interpolate(template, bindings)
