"""
Bank Dice - Game Coordinator

Owns the roster, the game configuration and the score ledger, and drives
RoundEngine from round to round until a single leader remains after the
scheduled rounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Sequence
from uuid import UUID

from pydantic import ValidationError

from src.config.logging_config import configure_logging
from src.config.settings import Settings, get_settings
from src.engine.base import GameConfig, RollKind, RollRecord, RollResult
from src.engine.errors import ConfigurationError, GameStateError
from src.engine.round_engine import RoundEngine
from src.engine.validators import validate_doubles_entry
from src.session.events import EventPayload, GameEvent
from src.session.ledger import ScoreLedger
from src.session.models import Player, Standing

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    """What the table is waiting for next."""

    ROLLING = auto()
    BANKING = auto()
    ROUND_ENDED = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class BankResult:
    """Players that banked in one step and the pot they locked in."""

    banked: tuple[UUID, ...]
    pot: int
    round_over: bool


@dataclass(frozen=True)
class GameOutcome:
    """
    Answer to "is the game over?".

    Attributes:
        decided: False while the round still lacks a result for someone
        over: True once a single leader exists after the scheduled rounds
        winner_id: The leader when over is True
    """

    decided: bool
    over: bool
    winner_id: UUID | None = None


class GameCoordinator:
    """Single entry point the UI layer talks to."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.engine = RoundEngine()
        self._reset()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GameCoordinator:
        """Load settings, apply their logging configuration and build a coordinator."""
        settings = settings or get_settings()
        configure_logging(settings)
        return cls(settings=settings)

    def _reset(self) -> None:
        self.players: list[Player] = []
        self.config: GameConfig | None = None
        self.ledger: ScoreLedger | None = None
        self.has_active_game = False
        self._winner_id: UUID | None = None
        self._events: list[EventPayload] = []

    # --- setup -----------------------------------------------------------

    def start_game(self, names: Sequence[str], rounds: int | None = None) -> list[Player]:
        """
        Seat the players in the given order and start round 1.

        Args:
            names: Player names in turn order (3-8)
            rounds: Scheduled rounds (7-30), defaults to settings.default_rounds

        Returns:
            The roster

        Raises:
            ConfigurationError: If a bound is violated or a name is blank
        """
        names = list(names)
        if rounds is None:
            rounds = self.settings.default_rounds

        config = GameConfig(max_rounds=rounds, num_players=len(names))

        players = []
        for order, name in enumerate(names):
            try:
                players.append(Player(name=name, turn_order=order))
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid player name {name!r}.") from exc

        self._reset()
        self.players = players
        self.config = config
        self.ledger = ScoreLedger(self.ordered_player_ids)
        self.engine.start_game(self.ordered_player_ids, config.max_rounds)
        self.has_active_game = True

        logger.info(
            "Game started: %d players, %d rounds", config.num_players, config.max_rounds
        )
        self._emit(
            GameEvent.GAME_STARTED,
            data={"max_rounds": config.max_rounds, "players": [p.name for p in players]},
        )
        return list(players)

    def quit_game(self) -> None:
        """Abandon the current game. Queued events are kept for draining."""
        if not self.has_active_game:
            return
        round_number = self.engine.round_number
        events = self._events
        self._reset()
        self._events = events
        self._events.append(EventPayload(event=GameEvent.GAME_QUIT, round_number=round_number))
        logger.info("Game quit during round %d", round_number)

    # --- roster queries --------------------------------------------------

    @property
    def ordered_player_ids(self) -> tuple[UUID, ...]:
        return tuple(p.id for p in self.players)

    def get_player(self, player_id: UUID) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise ValueError(f"Unknown player {player_id}.")

    def player_name(self, player_id: UUID) -> str:
        return self.get_player(player_id).name

    @property
    def current_roller(self) -> Player:
        self._require_active()
        index = min(max(self.engine.roller_index, 0), len(self.players) - 1)
        return self.players[index]

    def is_player_in_round(self, player_id: UUID) -> bool:
        return self.engine.is_active(player_id)

    def total(self, player_id: UUID) -> int:
        self._require_active()
        return self.ledger.total(player_id)

    # --- round queries ---------------------------------------------------

    @property
    def round_number(self) -> int:
        return self.engine.round_number

    @property
    def roll_count(self) -> int:
        return self.engine.roll_count

    @property
    def pot(self) -> int:
        return self.engine.pot

    @property
    def can_bank_now(self) -> bool:
        return self.engine.can_bank_now

    @property
    def is_round_over(self) -> bool:
        return self.engine.is_round_over

    @property
    def phase(self) -> TurnPhase:
        self._require_active()
        if self._winner_id is not None:
            return TurnPhase.GAME_OVER
        if self.engine.is_round_over:
            return TurnPhase.ROUND_ENDED
        if self.engine.can_bank_now:
            return TurnPhase.BANKING
        return TurnPhase.ROLLING

    @property
    def winner(self) -> Player | None:
        if self._winner_id is None:
            return None
        return self.get_player(self._winner_id)

    # --- turn flow -------------------------------------------------------

    def apply_roll(self, kind: RollKind | str, total: int | None = None) -> RollResult:
        """
        Report the current roller's roll.

        During the safety zone the dice pass to the next player after each
        roll. A press-zone Seven gives everyone who has not banked a zero
        for the round and ends it.

        Raises:
            InvalidRollValue: If the total is missing or out of range
            GameStateError: If no round is in progress
        """
        self._require_round_in_progress()

        if self.settings.strict_doubles and kind in (RollKind.DOUBLES, RollKind.DOUBLES.value):
            validate_doubles_entry(total)

        order = self.ordered_player_ids
        roller_id = order[self.engine.roller_index]
        result = self.engine.apply_roll(kind, total, order)

        logger.debug(
            "Round %d roll %d: %s %s -> pot %d",
            self.engine.round_number, result.roll_count, kind, total, result.pot,
        )
        self._emit(
            GameEvent.ROLL_APPLIED,
            player_id=roller_id,
            data={
                "kind": RollKind(kind).value,
                "total": total,
                "pot_delta": result.pot_delta,
                "pot": result.pot,
                "zone": result.zone.value,
                "roll_count": result.roll_count,
            },
        )

        if result.round_ended_by_seven:
            zeroed = self.ledger.record_zero_for_unbanked(self.engine.round_number)
            self.engine.force_end_round()
            logger.info(
                "Round %d: seven in the press zone, %d players scored 0",
                self.engine.round_number, len(zeroed),
            )
            self._end_round(reason="seven")
        elif not self.engine.can_bank_now:
            self._advance()

        return result

    def apply_record(self, record: RollRecord) -> RollResult:
        """Report a roll as a RollRecord, e.g. RollRecord.from_dice(3, 4)."""
        return self.apply_roll(record.kind, record.total)

    def bank_players(self, player_ids: Iterable[UUID]) -> BankResult:
        """
        Lock in the current pot for the given players.

        Ids that are not in the round (already banked, or unknown) are
        ignored. If the current roller banked, the dice move on to the next
        player still in.

        Raises:
            GameStateError: If no round is in progress or banking is not open yet
        """
        self._require_round_in_progress()
        if not self.engine.can_bank_now:
            raise GameStateError(
                f"Banking opens after roll {self.engine.SAFETY_ROLLS} "
                f"(roll {self.engine.roll_count} taken)."
            )

        banking = [pid for pid in dict.fromkeys(player_ids) if self.engine.is_active(pid)]
        pot = self.engine.pot
        if banking:
            self.ledger.record_bank(banking, self.engine.round_number, pot)
            self.engine.bank_players(banking)
            logger.debug(
                "Round %d: %d players banked %d", self.engine.round_number, len(banking), pot
            )
            self._emit(
                GameEvent.PLAYERS_BANKED,
                data={"player_ids": list(banking), "pot": pot},
            )

        round_over = self.engine.is_round_over
        if round_over:
            self._end_round(reason="all_banked")
        else:
            order = self.ordered_player_ids
            self.engine.set_roller_index(self.engine.normalize_roller_index(order), order)

        return BankResult(banked=tuple(banking), pot=pot, round_over=round_over)

    def resolve_banking(self, player_ids: Iterable[UUID] = ()) -> BankResult:
        """Nobody selected passes the dice on; otherwise the selection banks."""
        self._require_round_in_progress()
        if not self.engine.can_bank_now:
            raise GameStateError("Nothing to resolve before banking opens.")
        selected = [pid for pid in player_ids if self.engine.is_active(pid)]
        if selected:
            return self.bank_players(selected)

        self.advance_to_next_roller()
        return BankResult(banked=(), pot=self.engine.pot, round_over=False)

    def advance_to_next_roller(self) -> None:
        """Pass the dice. Does nothing once the round is over."""
        self._require_active()
        self._advance()

    def next_round(self) -> None:
        """
        Start the next round, including tie-break rounds past the schedule.

        Raises:
            GameStateError: If the round is unfinished or the game is won
        """
        self._require_active()
        if self._winner_id is not None:
            raise GameStateError("Game is over.")

        round_number = self.engine.round_number
        if not self.ledger.round_complete(round_number):
            raise GameStateError(f"Round {round_number} is not finished yet.")

        self.ledger.start_round()
        self.engine.next_round(self.ordered_player_ids)

        if self.engine.round_number > self.config.max_rounds:
            logger.info("Tie at the top, playing extra round %d", self.engine.round_number)
        self._emit(GameEvent.ROUND_STARTED)

    # --- scoring ---------------------------------------------------------

    def is_game_over(self, round_number: int | None = None) -> GameOutcome:
        """
        Decide whether the game has a winner as of the given round.

        Undecided until everyone has a result for the round. After the
        scheduled rounds a single leader wins; a tie at the top means
        another round must be played.
        """
        self._require_active()
        if round_number is None:
            round_number = self.engine.round_number

        if not self.ledger.round_complete(round_number):
            return GameOutcome(decided=False, over=False)

        if round_number < self.config.max_rounds:
            return GameOutcome(decided=True, over=False)

        leaders = self.ledger.leaders(round_number)
        if len(leaders) == 1:
            return GameOutcome(decided=True, over=True, winner_id=leaders[0])
        return GameOutcome(decided=True, over=False)

    def standings(self) -> list[Standing]:
        """Players by total, highest first. Equal totals share a rank."""
        self._require_active()
        round_number = self.engine.round_number
        totals = self.ledger.totals()
        rows = []
        for player in sorted(self.players, key=lambda p: -totals[p.id]):
            entry = self.ledger.entry_for(player.id, round_number)
            rows.append(
                Standing(
                    player_id=player.id,
                    name=player.name,
                    round_points=entry.points if entry else 0,
                    total=totals[player.id],
                    rank=1 + sum(1 for t in totals.values() if t > totals[player.id]),
                )
            )
        return rows

    # --- events ----------------------------------------------------------

    def drain_events(self) -> list[EventPayload]:
        """Return and clear the queued events, oldest first."""
        events, self._events = self._events, []
        return events

    # --- internals -------------------------------------------------------

    def _emit(self, event: GameEvent, player_id: UUID | None = None, data: dict | None = None) -> None:
        self._events.append(
            EventPayload(
                event=event,
                round_number=self.engine.round_number,
                player_id=player_id,
                data=data or {},
            )
        )

    def _advance(self) -> None:
        before = self.engine.roller_index
        self.engine.advance_to_next_roller(self.ordered_player_ids)
        if self.engine.roller_index != before:
            self._emit(
                GameEvent.ROLLER_ADVANCED,
                player_id=self.ordered_player_ids[self.engine.roller_index],
            )

    def _end_round(self, reason: str) -> None:
        round_number = self.engine.round_number
        logger.info("Round %d ended (%s)", round_number, reason)
        self._emit(
            GameEvent.ROUND_ENDED,
            data={"reason": reason, "totals": {str(k): v for k, v in self.ledger.totals().items()}},
        )

        outcome = self.is_game_over(round_number)
        if outcome.over:
            self._winner_id = outcome.winner_id
            logger.info(
                "Game over after round %d, winner %s",
                round_number, self.player_name(outcome.winner_id),
            )
            self._emit(GameEvent.GAME_WON, player_id=outcome.winner_id)

    def _require_active(self) -> None:
        if not self.has_active_game:
            raise GameStateError("No active game.")

    def _require_round_in_progress(self) -> None:
        self._require_active()
        if self._winner_id is not None:
            raise GameStateError("Game is over.")
        if self.engine.is_round_over:
            raise GameStateError(
                f"Round {self.engine.round_number} is over; start the next round."
            )
