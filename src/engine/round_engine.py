"""
Bank Dice - Round Engine

State machine for the round currently being played: roll count, pot,
which players are still in, and whose turn it is to roll.

Game Rules:
- Rolls 1-3 of a round are the safety zone: Seven adds 70, Doubles and
  Value add the dice total
- From roll 4 (press zone): Value adds the total, Doubles double the pot,
  Seven wipes the pot and ends the round for everyone still in
- Players may bank once 3 rolls have been taken; banked players sit out
  the rest of the round
- The round is over when nobody is left in it

The engine knows nothing about cumulative scores; the session layer records
those. Turn order is passed in as an ordered sequence of ids on each call
that needs it, while the players still in the round are a set of ids.
"""

from typing import ClassVar, Hashable, Iterable, Sequence

from src.engine.base import GameConfig, RollKind, RollRecord, RollResult, RoundState, Zone
from src.engine.errors import InvalidRollValue
from src.engine.rules import SAFETY_ROLLS, SEVEN_BONUS_IN_SAFETY, is_safety_roll
from src.engine.validators import validate_player_ids, validate_roll_total


class RoundEngine:
    """Tracks and mutates the state of the current round."""

    SAFETY_ROLLS: ClassVar[int] = SAFETY_ROLLS
    SEVEN_BONUS_IN_SAFETY: ClassVar[int] = SEVEN_BONUS_IN_SAFETY

    def __init__(self) -> None:
        self.config: GameConfig | None = None
        self._round_number = 1
        self._roll_count = 0
        self._pot = 0
        self._active: set[Hashable] = set()
        self._roller_index = 0

    # --- queries ---------------------------------------------------------

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def roll_count(self) -> int:
        return self._roll_count

    @property
    def pot(self) -> int:
        return self._pot

    @property
    def roller_index(self) -> int:
        return self._roller_index

    @property
    def max_rounds(self) -> int | None:
        return self.config.max_rounds if self.config else None

    @property
    def active_players(self) -> frozenset:
        """Ids still eligible to roll or bank this round."""
        return frozenset(self._active)

    @property
    def can_bank_now(self) -> bool:
        """Banking opens once the safety rolls have been taken."""
        return self._roll_count >= self.SAFETY_ROLLS

    @property
    def is_round_over(self) -> bool:
        return not self._active

    @property
    def is_safety_zone(self) -> bool:
        """True while the next roll would still land in the safety zone."""
        return is_safety_roll(self._roll_count + 1)

    @property
    def state(self) -> RoundState:
        """Immutable snapshot of the current round."""
        return RoundState(
            round_number=self._round_number,
            roll_count=self._roll_count,
            pot=self._pot,
            active_players=frozenset(self._active),
            roller_index=self._roller_index,
        )

    def is_active(self, player_id: Hashable) -> bool:
        return player_id in self._active

    # --- lifecycle -------------------------------------------------------

    def start_game(self, player_ids: Iterable[Hashable], max_rounds: int) -> None:
        """
        Validate the setup and start round 1.

        Args:
            player_ids: Ids in turn order (3-8, unique)
            max_rounds: Scheduled rounds (7-30)

        Raises:
            ConfigurationError: If either bound is violated
        """
        ids = tuple(player_ids)
        config = GameConfig(max_rounds=max_rounds, num_players=len(ids))
        validate_player_ids(ids)

        self.config = config
        self._round_number = 1
        self.reset_round(ids)

    def reset_round(self, ordered_player_ids: Sequence[Hashable]) -> None:
        """Empty the pot and put every player back in the round."""
        self._roll_count = 0
        self._pot = 0
        self._active = set(ordered_player_ids)
        self._roller_index = 0

    def next_round(self, ordered_player_ids: Sequence[Hashable]) -> None:
        self._round_number += 1
        self.reset_round(ordered_player_ids)

    # --- rolls -----------------------------------------------------------

    def apply_roll(
        self,
        kind: RollKind | str,
        total: int | None,
        ordered_player_ids: Sequence[Hashable],
    ) -> RollResult:
        """
        Apply a reported roll to the pot.

        The roll is validated before anything changes, so a rejected roll
        leaves the round untouched. Doubles totals are not checked for
        parity here.

        Args:
            kind: Seven, Doubles or Value
            total: Dice total (ignored for Seven, 2-12 otherwise)
            ordered_player_ids: Turn order, used to keep the roller on an
                active player

        Returns:
            RollResult describing the pot change

        Raises:
            InvalidRollValue: If the kind is unknown or the total is
                missing or out of range
        """
        try:
            kind = RollKind(kind)
        except ValueError as exc:
            raise InvalidRollValue(f"Unknown roll kind {kind!r}.") from exc

        if kind is RollKind.DOUBLES:
            total = validate_roll_total(total, label="Doubles")
        elif kind is RollKind.VALUE:
            total = validate_roll_total(total, label="Value")

        self._roll_count += 1
        zone = Zone.SAFETY if is_safety_roll(self._roll_count) else Zone.PRESS
        pot_before = self._pot
        ended_by_seven = False

        if kind is RollKind.SEVEN:
            if zone is Zone.SAFETY:
                self._pot += self.SEVEN_BONUS_IN_SAFETY
            else:
                self._pot = 0
                ended_by_seven = True
        elif kind is RollKind.DOUBLES:
            if zone is Zone.SAFETY:
                self._pot += total
            else:
                self._pot *= 2
        else:
            self._pot += total

        if not ended_by_seven and self._active:
            self._roller_index = self.normalize_roller_index(ordered_player_ids)

        return RollResult(
            pot_delta=self._pot - pot_before,
            round_ended_by_seven=ended_by_seven,
            pot=self._pot,
            roll_count=self._roll_count,
            zone=zone,
        )

    def apply_record(
        self, record: RollRecord, ordered_player_ids: Sequence[Hashable]
    ) -> RollResult:
        """Apply a RollRecord, e.g. one built with RollRecord.from_dice()."""
        return self.apply_roll(record.kind, record.total, ordered_player_ids)

    # --- turn rotation ---------------------------------------------------

    def normalize_roller_index(self, ordered_player_ids: Sequence[Hashable]) -> int:
        """
        Nearest active position at or after the current roller, wrapping.

        Returns the current index unchanged when that player is still in,
        and 0 when the roster is empty or nobody is active.
        """
        count = len(ordered_player_ids)
        if count == 0:
            return 0

        for offset in range(count):
            idx = (self._roller_index + offset) % count
            if ordered_player_ids[idx] in self._active:
                return idx

        return 0

    def advance_to_next_roller(self, ordered_player_ids: Sequence[Hashable]) -> None:
        """Pass the dice to the next active player after the current one."""
        if not self._active:
            return

        count = len(ordered_player_ids)
        for step in range(1, count + 1):
            idx = (self._roller_index + step) % count
            if ordered_player_ids[idx] in self._active:
                self._roller_index = idx
                return

    def set_roller_index(self, index: int, ordered_player_ids: Sequence[Hashable]) -> None:
        """Commit a roller position, typically one from normalize_roller_index."""
        if not (0 <= index < max(len(ordered_player_ids), 1)):
            raise ValueError(
                f"Roller index {index} is out of range for {len(ordered_player_ids)} players."
            )
        self._roller_index = index

    # --- banking ---------------------------------------------------------

    def bank_players(self, player_ids: Iterable[Hashable]) -> None:
        """Take players out of the round. Unknown or repeated ids are ignored."""
        for player_id in player_ids:
            self._active.discard(player_id)

    def force_end_round(self) -> None:
        """Drop everyone from the round (after a press-zone Seven)."""
        self._active.clear()
