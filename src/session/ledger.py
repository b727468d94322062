"""
Bank Dice - Score Ledger

Per-player history of round results and running totals.
Entries are append-only; a player gets at most one entry per round.
"""

from typing import Hashable, Iterable, Sequence

from src.engine.base import RoundScoreEntry
from src.engine.errors import GameStateError


class ScoreLedger:
    """Records banked and zeroed rounds for every player on the roster."""

    def __init__(self, player_ids: Sequence[Hashable]) -> None:
        self._order: tuple[Hashable, ...] = tuple(player_ids)
        self._entries: dict[Hashable, list[RoundScoreEntry]] = {
            player_id: [] for player_id in self._order
        }
        self._banked: set[Hashable] = set()

    @property
    def player_ids(self) -> tuple[Hashable, ...]:
        return self._order

    @property
    def banked_this_round(self) -> frozenset:
        return frozenset(self._banked)

    def start_round(self) -> None:
        """Forget who banked in the previous round."""
        self._banked.clear()

    def _history(self, player_id: Hashable) -> list[RoundScoreEntry]:
        try:
            return self._entries[player_id]
        except KeyError:
            raise ValueError(f"Unknown player {player_id!r}.") from None

    def _check_open(self, player_id: Hashable, round_number: int) -> None:
        if any(entry.round_number == round_number for entry in self._history(player_id)):
            raise GameStateError(
                f"Player {player_id!r} already has a result for round {round_number}."
            )

    def _append(self, player_id: Hashable, round_number: int, points: int) -> RoundScoreEntry:
        history = self._history(player_id)
        previous_total = history[-1].running_total if history else 0
        entry = RoundScoreEntry(
            player_id=player_id,
            round_number=round_number,
            points=points,
            running_total=previous_total + points,
        )
        history.append(entry)
        return entry

    def record_bank(
        self, player_ids: Iterable[Hashable], round_number: int, pot: int
    ) -> list[RoundScoreEntry]:
        """
        Lock in the pot for each banking player.

        Args:
            player_ids: Players banking together
            round_number: Round being played
            pot: Pot value at the moment of banking

        Returns:
            The new entries, in the order given
        """
        ids = list(dict.fromkeys(player_ids))
        for player_id in ids:
            self._check_open(player_id, round_number)

        entries = []
        for player_id in ids:
            entries.append(self._append(player_id, round_number, pot))
            self._banked.add(player_id)
        return entries

    def record_zero_for_unbanked(self, round_number: int) -> list[RoundScoreEntry]:
        """Give every player who has not banked this round a zero result."""
        unbanked = [pid for pid in self._order if pid not in self._banked]
        for player_id in unbanked:
            self._check_open(player_id, round_number)
        return [self._append(player_id, round_number, 0) for player_id in unbanked]

    # --- queries ---------------------------------------------------------

    def history(self, player_id: Hashable) -> tuple[RoundScoreEntry, ...]:
        return tuple(self._history(player_id))

    def total(self, player_id: Hashable) -> int:
        """Latest running total (0 before the first result)."""
        history = self._history(player_id)
        return history[-1].running_total if history else 0

    def total_as_of(self, player_id: Hashable, round_number: int) -> int:
        """Running total after the given round, ignoring later results."""
        total = 0
        for entry in self._history(player_id):
            if entry.round_number > round_number:
                break
            total = entry.running_total
        return total

    def totals(self, round_number: int | None = None) -> dict[Hashable, int]:
        """Totals in turn order, as of round_number when one is given."""
        if round_number is None:
            return {player_id: self.total(player_id) for player_id in self._order}
        return {
            player_id: self.total_as_of(player_id, round_number)
            for player_id in self._order
        }

    def entry_for(self, player_id: Hashable, round_number: int) -> RoundScoreEntry | None:
        for entry in self._history(player_id):
            if entry.round_number == round_number:
                return entry
        return None

    def has_banked(self, player_id: Hashable) -> bool:
        return player_id in self._banked

    def round_complete(self, round_number: int) -> bool:
        """True when every player has a result for the round."""
        return all(
            self.entry_for(player_id, round_number) is not None
            for player_id in self._order
        )

    def leaders(self, round_number: int | None = None) -> list[Hashable]:
        """Players sharing the highest total, in turn order."""
        if not self._order:
            return []
        totals = self.totals(round_number)
        best = max(totals.values())
        return [player_id for player_id in self._order if totals[player_id] == best]
