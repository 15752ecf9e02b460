"""Match registry for emphasis delimiter tracking.

Keeps opener/closer pairing outside the (immutable) delimiter tokens.

Thread Safety:
One registry per inline parse; nothing is shared.

"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class DelimiterMatch:
    """One opener/closer pairing.

    Attributes:
        opener_idx: Token index of the opener.
        closer_idx: Token index of the closer.
        match_count: Delimiters used (1 = emphasis, 2 = strong or strikethrough).

    """

    opener_idx: int
    closer_idx: int
    match_count: int


@dataclass(slots=True)
class MatchRegistry:
    """Delimiter match state for one token list.

    Usage:
        registry = MatchRegistry()
        registry.record_match(opener_idx=0, closer_idx=5, count=2)
        registry.remaining_count(0, original_count=3)  # 1

    """

    matches: list[DelimiterMatch] = field(default_factory=list)
    consumed: dict[int, int] = field(default_factory=dict)
    deactivated: set[int] = field(default_factory=set)
    # A single opener can pair with several closers (***a** b*)
    _by_opener: dict[int, list[DelimiterMatch]] = field(default_factory=dict)

    def record_match(self, opener_idx: int, closer_idx: int, count: int) -> None:
        match = DelimiterMatch(opener_idx, closer_idx, count)
        self.matches.append(match)
        self._by_opener.setdefault(opener_idx, []).append(match)
        self.consumed[opener_idx] = self.consumed.get(opener_idx, 0) + count
        self.consumed[closer_idx] = self.consumed.get(closer_idx, 0) + count

    def is_active(self, idx: int) -> bool:
        return idx not in self.deactivated

    def deactivate(self, idx: int) -> None:
        self.deactivated.add(idx)

    def remaining_count(self, idx: int, original_count: int) -> int:
        """Delimiters of token ``idx`` not yet used by any match."""
        return original_count - self.consumed.get(idx, 0)

    def matches_for_opener(self, idx: int) -> list[DelimiterMatch]:
        return self._by_opener.get(idx, [])
