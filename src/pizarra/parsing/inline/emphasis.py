"""Emphasis delimiter runs and the CommonMark matching pass.

``EmphasisSyntax`` turns runs of ``*`` and ``_`` into ``DelimiterToken``s
during tokenization; ``process_emphasis`` later pairs them up. The
strikethrough plugin contributes ``~~`` runs that go through the same pass.

See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pizarra.parsing.charsets import is_unicode_punctuation, is_unicode_whitespace
from pizarra.parsing.inline.match_registry import MatchRegistry
from pizarra.parsing.inline.tokens import DelimiterToken, InlineToken

if TYPE_CHECKING:
    from pizarra.parsing.protocols import InlineContext
    from pizarra.reader import Reader


def is_left_flanking(before: str, after: str) -> bool:
    """Not followed by whitespace, and not followed by punctuation unless
    preceded by whitespace or punctuation."""
    if is_unicode_whitespace(after):
        return False
    if not is_unicode_punctuation(after):
        return True
    return is_unicode_whitespace(before) or is_unicode_punctuation(before)


def is_right_flanking(before: str, after: str) -> bool:
    """Mirror image of ``is_left_flanking``."""
    if is_unicode_whitespace(before):
        return False
    if not is_unicode_punctuation(before):
        return True
    return is_unicode_whitespace(after) or is_unicode_punctuation(after)


def surrounding_chars(reader: Reader, start: int, stop: int) -> tuple[str, str]:
    """Characters just outside ``[start, stop)``; empty at the text edges."""
    source = reader.source
    before = source[start - 1] if start > 0 else ""
    after = source[stop] if stop < len(source) else ""
    return before, after


class EmphasisSyntax:
    """``*`` and ``_`` delimiter runs."""

    __slots__ = ()

    triggers = frozenset("*_")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        char = reader.peek_char()
        start = reader.offset
        source = reader.source
        stop = start
        while stop < len(source) and source[stop] == char:
            stop += 1

        before, after = surrounding_chars(reader, start, stop)
        left = is_left_flanking(before, after)
        right = is_right_flanking(before, after)

        if char == "_":
            can_open = left and (not right or is_unicode_punctuation(before))
            can_close = right and (not left or is_unicode_punctuation(after))
        else:
            can_open = left
            can_close = right

        reader.advance(stop - start)
        return DelimiterToken(char, stop - start, can_open, can_close)  # type: ignore[arg-type]


def process_emphasis(tokens: list[InlineToken]) -> MatchRegistry:
    """Pair delimiter tokens into emphasis, strong and strikethrough matches.

    Keeps one stack of candidate openers per delimiter character. Closers
    are resolved left to right against the nearest compatible opener,
    applying the "multiple of 3" rule.
    """
    registry = MatchRegistry()
    openers: dict[str, list[int]] = {"*": [], "_": [], "~": []}

    idx = 0
    n = len(tokens)
    while idx < n:
        closer = tokens[idx]
        if not isinstance(closer, DelimiterToken):
            idx += 1
            continue

        if not (closer.can_close and registry.is_active(idx)):
            if closer.can_open:
                openers[closer.char].append(idx)
            idx += 1
            continue

        stack = openers[closer.char]
        matched = False
        for pos in range(len(stack) - 1, -1, -1):
            opener_idx = stack[pos]
            opener = tokens[opener_idx]
            if not isinstance(opener, DelimiterToken) or not registry.is_active(opener_idx):
                continue

            opener_left = registry.remaining_count(opener_idx, opener.count)
            closer_left = registry.remaining_count(idx, closer.count)

            either_both_ways = (opener.can_open and opener.can_close) or (
                closer.can_open and closer.can_close
            )
            if (
                either_both_ways
                and (opener_left + closer_left) % 3 == 0
                and (opener_left % 3 != 0 or closer_left % 3 != 0)
            ):
                continue

            # ~~ only pairs with ~~
            if closer.char == "~" and opener_left != closer_left:
                continue

            matched = True
            use = 2 if opener_left >= 2 and closer_left >= 2 else 1
            registry.record_match(opener_idx, idx, use)

            for mid in range(opener_idx + 1, idx):
                if isinstance(tokens[mid], DelimiterToken):
                    registry.deactivate(mid)
            for other in openers.values():
                while other and other[-1] > opener_idx:
                    other.pop()

            if registry.remaining_count(opener_idx, opener.count) == 0:
                registry.deactivate(opener_idx)
                if stack and stack[-1] == opener_idx:
                    stack.pop()
            if registry.remaining_count(idx, closer.count) == 0:
                registry.deactivate(idx)
            break

        if not matched:
            if closer.can_open:
                stack.append(idx)
            else:
                registry.deactivate(idx)
            idx += 1
        elif not registry.is_active(idx):
            idx += 1
        # else: closer still has delimiters left, try again from the same index

    return registry


__all__ = [
    "EmphasisSyntax",
    "is_left_flanking",
    "is_right_flanking",
    "process_emphasis",
    "surrounding_chars",
]
