"""Entry point: run a demonstration duel and tournament."""

import logging
import sys

from ki_arena.config import get_settings
from ki_arena.engine import AttackKind, CombatLogger, GameSession, quick_resolve
from ki_arena.engine.commands import AttackCommand, CommandBus, CommandContext, EndTurnCommand, log_middleware

DEMO_PRESETS = [
    {"id": "goku", "type": "Saiyan", "name": "Goku", "attackLabels": {"KiEnergy": "Kamehameha"}},
    {"id": "vegeta", "type": "Saiyan", "name": "Vegeta", "attackLabels": {"KiEnergy": "Final Flash"}},
    {"id": "gohan", "type": "Saiyan", "name": "Gohan", "statsOverride": {"strength": 19}},
    {"id": "trunks", "type": "Saiyan", "name": "Trunks", "statsOverride": {"speed": 24}},
    {"id": "piccolo", "type": "Namekian", "name": "Piccolo"},
    {"id": "a16", "type": "Android", "name": "Android 16", "statsOverride": {"strength": 19}},
    {"id": "a17", "type": "Android", "name": "Android 17"},
    {"id": "a18", "type": "Android", "name": "Android 18", "statsOverride": {"speed": 21}},
]

MAX_ACTIONS = 200


def run_duel(session: GameSession, first: str, second: str) -> None:
    """Play a duel with a greedy policy: Special, then KiEnergy, then Normal."""
    combat_logger = CombatLogger(battle_id=f"{first}-vs-{second}")
    combat_logger.attach(session.bus)

    battle = session.start_battle(first, second)
    commands = CommandBus(CommandContext(session), middlewares=[log_middleware])
    preference = [AttackKind.SPECIAL, AttackKind.KI_ENERGY, AttackKind.NORMAL]

    passes = 0
    for _ in range(MAX_ACTIONS):
        if battle.is_over or passes >= 2:
            break
        available = battle.available_kinds()
        choice = next((kind for kind in preference if kind in available), None)
        if choice is None:
            commands.dispatch(EndTurnCommand())
            passes += 1
            continue
        passes = 0
        commands.dispatch(AttackCommand(choice))

    combat_logger.log_state_snapshot(list(battle.fighters))
    combat_logger.detach(session.bus)
    print(combat_logger.get_log().format_readable())
    if not battle.is_over:
        print("No winner: neither fighter can act.")


def run_tournament(session: GameSession, player_name: str) -> None:
    """Simulate a full bracket, the player's matches included."""
    tournament = session.start_tournament(player_name)
    while not tournament.is_finished():
        tournament.resolve_pending(session.roster.get)
        mine = tournament.next_player_match()
        if mine is None:
            continue
        winner = quick_resolve(session.roster.get(mine.match.a), session.roster.get(mine.match.b), session.rng)
        tournament.report(mine.round_index, mine.match_index, winner)

    for index, matches in enumerate(tournament.to_dict()):
        print(f"Round {index + 1}: " + ", ".join(f"{m['a']} vs {m['b']} -> {m.get('winner')}" for m in matches))
    print(f"Tournament winner: {tournament.winner()}")


def main() -> None:
    """Run the demonstration."""
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    session = GameSession(settings=settings)
    session.roster.load_presets(DEMO_PRESETS)
    for preset in DEMO_PRESETS:
        session.roster.spawn(preset["id"])

    logging.info("Starting Ki Arena demo...")
    run_duel(session, "Goku", "Android 18")
    run_tournament(session, "Vegeta")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
