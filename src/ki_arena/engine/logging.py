"""Combat logging system for tracking and verifying engine output.

A CombatLogger listens on the event bus and records every event in order:
- Attacks (executed and dodged)
- Condition changes
- Turn and battle lifecycle
- Status effect lifecycle
Callers can also record state snapshots of the fighters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .events import BattleStarted, GameEvent, TurnChanged

if TYPE_CHECKING:
    from .events import EventBus
    from .types import Combatant


class LogEventType(str, Enum):
    """Types of log events."""

    # Combat
    ATTACK_EXECUTED = "AttackExecuted"
    ATTACK_DODGED = "AttackDodged"
    STATE_CHANGED = "StateChanged"

    # Battle lifecycle
    TURN_CHANGED = "TurnChanged"
    BATTLE_STARTED = "BattleStarted"
    BATTLE_ENDED = "BattleEnded"

    # Status effects
    EFFECT_STARTED = "EffectStarted"
    EFFECT_TICK = "EffectTick"
    EFFECT_ENDED = "EffectEnded"

    # Recorded by the caller
    STATE_SNAPSHOT = "state_snapshot"


@dataclass
class StateSnapshot:
    """Snapshot of a combatant's resources at a point in time."""

    name: str
    current_vitality: int
    max_vitality: int
    current_ki: int
    max_ki: int
    condition: str
    status_tags: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "current_vitality": self.current_vitality,
            "max_vitality": self.max_vitality,
            "current_ki": self.current_ki,
            "max_ki": self.max_ki,
            "condition": self.condition,
            "status_tags": dict(self.status_tags),
        }


@dataclass
class LogEntry:
    """A single log entry representing a combat event."""

    event_type: LogEventType
    round_number: int
    timestamp_order: int = 0  # Order within the log for deterministic sorting
    timestamp: int | None = None  # Event wall-clock time (ms)

    # Event payload, as serialized by the event
    data: dict[str, Any] = field(default_factory=dict)

    # For state snapshots - all fighters
    all_states: dict[str, StateSnapshot] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_type": self.event_type.value,
            "round_number": self.round_number,
            "timestamp_order": self.timestamp_order,
        }
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp
        if self.data:
            result["data"] = dict(self.data)
        if self.all_states is not None:
            result["all_states"] = {name: state.to_dict() for name, state in self.all_states.items()}
        return result


@dataclass
class CombatLog:
    """Complete log of a battle."""

    battle_id: str
    entries: list[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "battle_id": self.battle_id,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    def get_entries_by_type(self, event_type: LogEventType) -> list[LogEntry]:
        """Get all entries of a specific type."""
        return [e for e in self.entries if e.event_type == event_type]

    def get_entries_for_round(self, round_number: int) -> list[LogEntry]:
        """Get all entries for a specific round."""
        return [e for e in self.entries if e.round_number == round_number]

    def format_readable(self) -> str:
        """Format the log in a human-readable format."""
        lines: list[str] = [f"=== Combat Log ({self.battle_id}) ==="]

        current_round = -1
        for entry in self.entries:
            if entry.round_number != current_round:
                current_round = entry.round_number
                lines.append(f"--- Round {current_round} ---")
            lines.append(self._format_entry(entry))

        return "\n".join(lines)

    def _format_entry(self, entry: LogEntry) -> str:
        """Format a single log entry."""
        d = entry.data
        match entry.event_type:
            case LogEventType.BATTLE_STARTED:
                return f"  {d['p1']} vs {d['p2']}"

            case LogEventType.TURN_CHANGED:
                return f"  {d['active']} to act"

            case LogEventType.ATTACK_EXECUTED:
                return (
                    f"    → {d['attacker']}: {d['attack_name']} on {d['defender']} = {d['damage']} "
                    f"[Ki -{d['ki_spent']}, VIT left {d['defender_remaining_vitality']}]"
                )

            case LogEventType.ATTACK_DODGED:
                return f"    ✗ {d['defender']} dodged {d['attack_name']} from {d['attacker']}"

            case LogEventType.STATE_CHANGED:
                return f"    {d['warrior']}: {d['from_state']} → {d['to_state']}"

            case LogEventType.EFFECT_STARTED:
                return f"    + {d['who']} gains {d['effect']} ({d['total_rounds']}r)"

            case LogEventType.EFFECT_TICK:
                return f"    · {d['who']} {d['effect']} ({d['remaining_rounds']}r left)"

            case LogEventType.EFFECT_ENDED:
                return f"    - {d['who']} loses {d['effect']}"

            case LogEventType.BATTLE_ENDED:
                return f"  *** WINNER: {d['winner']} (over {d['loser']}) ***"

            case LogEventType.STATE_SNAPSHOT:
                if entry.all_states:
                    state_lines = [
                        f"      {name}: VIT={s.current_vitality}/{s.max_vitality}, "
                        f"KI={s.current_ki}/{s.max_ki}, {s.condition}"
                        for name, s in entry.all_states.items()
                    ]
                    return "    State snapshot:\n" + "\n".join(state_lines)
                return "    State snapshot (empty)"

            case _:
                return f"    {entry.event_type.value}"


class CombatLogger:
    """Event bus listener recording a battle.

    Usage:
        logger = CombatLogger(battle_id="Goku-vs-Vegeta")
        logger.attach(bus)
        # ... run the battle ...
        logger.detach(bus)
        print(logger.get_log().format_readable())
    """

    def __init__(self, battle_id: str) -> None:
        """Initialize the logger for a battle."""
        self.battle_id = battle_id
        self._log = CombatLog(battle_id=battle_id)
        self._order_counter = 0
        self.current_round = 1

    def _next_order(self) -> int:
        """Get the next timestamp order value."""
        self._order_counter += 1
        return self._order_counter

    def attach(self, bus: "EventBus") -> None:
        bus.subscribe(self.record)

    def detach(self, bus: "EventBus") -> None:
        bus.unsubscribe(self.record)

    def get_log(self) -> CombatLog:
        """Get the complete combat log."""
        return self._log

    def clear(self) -> None:
        """Clear all log entries."""
        self._log.entries.clear()
        self._order_counter = 0
        self.current_round = 1

    def record(self, event: GameEvent) -> None:
        """Record an event from the bus."""
        if isinstance(event, BattleStarted):
            self.current_round = 1
        elif isinstance(event, TurnChanged):
            self.current_round = event.round_number

        data = event.to_dict()
        data.pop("kind", None)
        timestamp = data.pop("timestamp", None)
        self._log.entries.append(
            LogEntry(
                event_type=LogEventType(event.kind.value),
                round_number=self.current_round,
                timestamp_order=self._next_order(),
                timestamp=timestamp,
                data=data,
            )
        )

    @staticmethod
    def snapshot_state(combatant: "Combatant") -> StateSnapshot:
        """Create a snapshot from a Combatant."""
        return StateSnapshot(
            name=combatant.name,
            current_vitality=combatant.current_vitality,
            max_vitality=combatant.max_vitality,
            current_ki=combatant.current_ki,
            max_ki=combatant.max_ki,
            condition=combatant.condition.value,
            status_tags=dict(combatant.status_tags),
        )

    def log_state_snapshot(self, combatants: list["Combatant"]) -> None:
        """Log a state snapshot for all fighters."""
        self._log.entries.append(
            LogEntry(
                event_type=LogEventType.STATE_SNAPSHOT,
                round_number=self.current_round,
                timestamp_order=self._next_order(),
                all_states={c.name: self.snapshot_state(c) for c in combatants},
            )
        )
