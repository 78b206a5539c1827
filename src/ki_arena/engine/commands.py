"""Command surface - uniform dispatch of user intents.

Commands wrap attack, turn and tournament operations. The bus runs
middleware before each command, keeps the history of successful ones and
turns engine errors into failed results instead of raising.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .enums import AttackKind
from .errors import KiArenaError
from .tournament import quick_resolve

if TYPE_CHECKING:
    from .duel import GameSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command."""

    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> "CommandResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "CommandResult":
        return cls(ok=False, error=error)


@dataclass
class CommandContext:
    """What commands act on."""

    session: "GameSession"


class Command(Protocol):
    type: str

    def execute(self, ctx: CommandContext) -> CommandResult: ...


Middleware = Callable[[Command, CommandContext], None]


def log_middleware(cmd: Command, ctx: CommandContext) -> None:
    logger.info("[CMD] %s", cmd.type)


@dataclass
class CommandBus:
    """Dispatches commands through middleware and records history."""

    ctx: CommandContext
    middlewares: list[Middleware] = field(default_factory=list)
    history: list[Command] = field(default_factory=list)

    def dispatch(self, cmd: Command) -> CommandResult:
        try:
            for middleware in self.middlewares:
                middleware(cmd, self.ctx)
            result = cmd.execute(self.ctx)
        except KiArenaError as e:
            result = CommandResult.failure(str(e))

        if result.ok:
            self.history.append(cmd)
        else:
            logger.info("%s failed: %s", cmd.type, result.error)
        return result


# =============================================================================
# Battle
# =============================================================================


@dataclass
class AttackCommand:
    """The active fighter of the current battle attacks."""

    kind: AttackKind | str
    type: str = "AttackCommand"

    def execute(self, ctx: CommandContext) -> CommandResult:
        battle = ctx.session.battle
        if battle is None:
            return CommandResult.failure("No active battle")
        try:
            battle.act(self.kind)
        except KiArenaError as e:
            return CommandResult.failure(str(e))
        return CommandResult.success()


@dataclass
class EndTurnCommand:
    type: str = "EndTurnCommand"

    def execute(self, ctx: CommandContext) -> CommandResult:
        battle = ctx.session.battle
        if battle is None:
            return CommandResult.failure("No active battle")
        battle.pass_turn()
        return CommandResult.success()


# =============================================================================
# Tournament
# =============================================================================


@dataclass
class SeedTournamentCommand:
    player_name: str
    all_names: list[str] | None = None
    type: str = "SeedTournamentCommand"

    def execute(self, ctx: CommandContext) -> CommandResult:
        try:
            ctx.session.start_tournament(self.player_name, self.all_names)
        except ValueError as e:
            return CommandResult.failure(str(e))
        return CommandResult.success()


@dataclass
class SimulateMatchCommand:
    """Quick-resolve a non-player match."""

    round_index: int
    match_index: int
    type: str = "SimulateMatchCommand"

    def execute(self, ctx: CommandContext) -> CommandResult:
        tournament = ctx.session.tournament
        if tournament is None:
            return CommandResult.failure("Tournament not ready")
        try:
            match = tournament.match_at(self.round_index, self.match_index)
        except ValueError as e:
            return CommandResult.failure(str(e))
        if match.done:
            return CommandResult.failure("Match is already decided")
        if not match.is_ready():
            return CommandResult.failure("Match is not seeded yet")

        roster = ctx.session.roster
        winner = quick_resolve(roster.get(match.a), roster.get(match.b), ctx.session.rng)
        try:
            tournament.report(self.round_index, self.match_index, winner)
        except ValueError as e:
            return CommandResult.failure(str(e))
        return CommandResult.success()


@dataclass
class ReportMatchCommand:
    """Record the result of a played match."""

    round_index: int
    match_index: int
    winner: str
    type: str = "ReportMatchCommand"

    def execute(self, ctx: CommandContext) -> CommandResult:
        tournament = ctx.session.tournament
        if tournament is None:
            return CommandResult.failure("Tournament not ready")
        try:
            tournament.report(self.round_index, self.match_index, self.winner)
        except ValueError as e:
            return CommandResult.failure(str(e))
        return CommandResult.success()
