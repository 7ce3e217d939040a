"""Round tracker for Buckshot Roulette.

Holds the state a player enters during a real game (shell counts, known
chambers, the people at the table) and keeps the chamber estimates and
move recommendation current. Every mutation recomputes the estimates
explicitly before returning, so callers never observe stale chambers.

Supports two modes:
- Calculator mode (via ``from_string`` or the setters): only what the
  user has observed is entered.
- Simulation mode (via ``load_magazine``): a shuffled magazine is dealt
  and its true firing order returned for the caller to play through.
"""

from __future__ import annotations

import dataclasses
import random

import buckshot
import compute_probabilities

_C = buckshot._Colors


def _default_players() -> list[buckshot.Player]:
    return [
        buckshot.Player(id=1, name="YOU", hp=4, max_hp=4, skill=0, is_user=True),
        buckshot.Player(id=2, name="DEALER", hp=4, max_hp=4, skill=3),
    ]


@dataclasses.dataclass
class RoundTracker:
    """The complete state of the table as the user sees it.

    Outside a round the chamber sequence always matches the shell counts
    and is rebuilt whenever they change. During a round its length is
    fixed except for shells being fired (front chamber removed) or
    corrected in (unknown chambers appended).

    Attributes:
        live_shells: Live shells left in the magazine.
        blank_shells: Blank shells left in the magazine.
        players: Everyone at the table, the user included.
        chambers: The firing order with current estimates.
        round_active: Whether shells are being fired.
    """
    live_shells: int = 0
    blank_shells: int = 0
    players: list[buckshot.Player] = dataclasses.field(
        default_factory=_default_players,
    )
    chambers: list[buckshot.Chamber] = dataclasses.field(default_factory=list)
    round_active: bool = False

    # -----------------------------------------------------------------
    # Factories
    # -----------------------------------------------------------------

    @classmethod
    def from_string(
        cls,
        live: int,
        blank: int,
        notation: str,
        players: list[buckshot.Player] | None = None,
    ) -> RoundTracker:
        """Enter a round in progress from chamber shorthand.

        Args:
            live: Live shells left in the magazine.
            blank: Blank shells left in the magazine.
            notation: Chamber states in firing order, e.g. ``"? L ? B"``.
                See ``buckshot.parse_chambers``.
            players: Players at the table. Defaults to YOU vs DEALER.

        Returns:
            An active-round tracker with estimates computed.

        Raises:
            ValueError: If a count is out of range, the notation is
                invalid, or the chamber count does not match
                ``live + blank``.
        """
        _check_shell_count("live", live)
        _check_shell_count("blank", blank)
        chambers = buckshot.parse_chambers(notation)
        if len(chambers) != live + blank:
            raise ValueError(
                f"Notation has {len(chambers)} chambers but "
                f"{live} live + {blank} blank = {live + blank} shells"
            )
        tracker = cls(
            live_shells=live,
            blank_shells=blank,
            players=players if players is not None else _default_players(),
            chambers=chambers,
            round_active=True,
        )
        tracker._recalculate()
        return tracker

    @classmethod
    def load_magazine(
        cls,
        live: int,
        blank: int,
        seed: int | None = None,
        players: list[buckshot.Player] | None = None,
    ) -> tuple[RoundTracker, list[buckshot.ShellType]]:
        """Load a shuffled magazine and start the round.

        Args:
            live: Live shells to load.
            blank: Blank shells to load.
            seed: Optional random seed for reproducibility.
            players: Players at the table. Defaults to YOU vs DEALER.

        Returns:
            The tracker (all chambers unknown) and the hidden firing
            order, front first.

        Raises:
            ValueError: If a count is out of range or both are zero.
        """
        if seed is not None:
            random.seed(seed)

        tracker = cls(
            players=players if players is not None else _default_players(),
        )
        tracker.set_live_shells(live)
        tracker.set_blank_shells(blank)
        tracker.start_round()
        if not tracker.round_active:
            raise ValueError("Cannot load an empty magazine")

        shells = (
            [buckshot.ShellType.LIVE] * live
            + [buckshot.ShellType.BLANK] * blank
        )
        random.shuffle(shells)
        return tracker, shells

    # -----------------------------------------------------------------
    # Derived State
    # -----------------------------------------------------------------

    @property
    def total_shells(self) -> int:
        return self.live_shells + self.blank_shells

    @property
    def probabilities(self) -> tuple[float, float]:
        """Aggregate ``(live_percent, blank_percent)`` for the next shot."""
        return compute_probabilities.calculate_probability(
            self.live_shells, self.blank_shells,
        )

    @property
    def opponents(self) -> list[buckshot.Player]:
        """Living players other than the user."""
        return [p for p in self.players if not p.is_user and p.is_alive]

    @property
    def recommendation(self) -> buckshot.MoveRecommendation:
        return compute_probabilities.recommend_move(
            self.live_shells, self.blank_shells, self.opponents,
        )

    @property
    def known_shell_count(self) -> int:
        return sum(1 for c in self.chambers if c.state.is_known)

    def chamber_at(self, position: int) -> buckshot.Chamber:
        """Return the chamber at a 1-based position.

        Raises:
            IndexError: If no chamber has that position.
        """
        if not (1 <= position <= len(self.chambers)):
            raise IndexError(
                f"Chamber position {position} out of range "
                f"(1-{len(self.chambers)})"
            )
        return self.chambers[position - 1]

    # -----------------------------------------------------------------
    # Shell Counts
    # -----------------------------------------------------------------

    def set_live_shells(self, value: int) -> None:
        """Set the live shell count.

        During a round, lowering the count means shells were fired (one
        front chamber consumed per shell) and raising it appends unknown
        chambers at the back.

        Raises:
            ValueError: If the value is outside ``0..MAX_SHELLS``.
        """
        _check_shell_count("live", value)
        self._apply_count_change(self.live_shells, value)
        self.live_shells = value
        self._sync_chambers()

    def set_blank_shells(self, value: int) -> None:
        """Set the blank shell count. See ``set_live_shells``.

        Raises:
            ValueError: If the value is outside ``0..MAX_SHELLS``.
        """
        _check_shell_count("blank", value)
        self._apply_count_change(self.blank_shells, value)
        self.blank_shells = value
        self._sync_chambers()

    def _apply_count_change(self, old: int, new: int) -> None:
        if not self.round_active:
            return
        if new < old:
            for _ in range(old - new):
                self._pop_front()
        elif new > old:
            next_position = len(self.chambers) + 1
            self.chambers = self.chambers + [
                buckshot.Chamber(position=next_position + i)
                for i in range(new - old)
            ]

    def _pop_front(self) -> None:
        self.chambers = buckshot.renumber_chambers(self.chambers[1:])

    def consume_front(self) -> None:
        """Drop the chamber that was just fired and renumber from 1.

        Counts are left alone; use ``fire`` to record the shell kind too.
        """
        self._pop_front()
        self._recalculate()

    def fire(self, shell: buckshot.ShellType) -> None:
        """Record that the front shell was fired and turned out ``shell``.

        Raises:
            ValueError: If no round is in progress or no shell of that
                kind is left.
        """
        if not self.round_active:
            raise ValueError("No round in progress")
        if shell == buckshot.ShellType.LIVE:
            if self.live_shells == 0:
                raise ValueError("No live shells left to fire")
            self.set_live_shells(self.live_shells - 1)
        else:
            if self.blank_shells == 0:
                raise ValueError("No blank shells left to fire")
            self.set_blank_shells(self.blank_shells - 1)

    def reset_shells(self) -> None:
        """Empty the magazine and leave the round."""
        self.live_shells = 0
        self.blank_shells = 0
        self.chambers = []
        self.round_active = False

    # -----------------------------------------------------------------
    # Round Lifecycle
    # -----------------------------------------------------------------

    def start_round(self) -> None:
        """Lock the chamber sequence. Ignored for an empty magazine."""
        if self.total_shells > 0:
            self.round_active = True

    def end_round(self) -> None:
        """Unlock the chamber sequence so it follows the counts again."""
        self.round_active = False
        self._sync_chambers()

    def toggle_round(self) -> None:
        if self.round_active:
            self.end_round()
        else:
            self.start_round()

    # -----------------------------------------------------------------
    # Chamber Marking
    # -----------------------------------------------------------------

    def mark_shell(self, position: int, state: buckshot.ShellState) -> None:
        """Set what is known about the shell at a 1-based position.

        Raises:
            IndexError: If no chamber has that position.
        """
        self.chamber_at(position)
        self.chambers = [
            dataclasses.replace(c, state=state) if c.position == position
            else c
            for c in self.chambers
        ]
        self._recalculate()

    def clear_all_chambers(self) -> None:
        """Forget every inspected shell."""
        self.chambers = [
            dataclasses.replace(c, state=buckshot.ShellState.UNKNOWN)
            for c in self.chambers
        ]
        self._recalculate()

    # -----------------------------------------------------------------
    # Players
    # -----------------------------------------------------------------

    def _player_index(self, player_id: int) -> int:
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        raise KeyError(f"No player with id {player_id}")

    def add_player(self) -> buckshot.Player:
        """Seat a new opponent at 2 hp and threat level 1.

        Returns:
            The new player.

        Raises:
            ValueError: If the table already seats ``MAX_PLAYERS``.
        """
        if len(self.players) >= buckshot.MAX_PLAYERS:
            raise ValueError(
                f"Table is full ({buckshot.MAX_PLAYERS} players)"
            )
        new_id = max((p.id for p in self.players), default=0) + 1
        player = buckshot.Player(
            id=new_id, name=f"OPPONENT {new_id}", hp=2, max_hp=4, skill=1,
        )
        self.players = self.players + [player]
        return player

    def remove_player(self, player_id: int) -> None:
        """Remove a player from the table.

        Raises:
            KeyError: If no player has that id.
        """
        index = self._player_index(player_id)
        self.players = self.players[:index] + self.players[index + 1:]

    def update_player(self, player_id: int, **changes: object) -> None:
        """Change attributes of a player, e.g. ``update_player(2, hp=1)``.

        Raises:
            KeyError: If no player has that id.
            ValueError: If a field does not exist, hp is outside
                ``0..max_hp``, or skill is outside ``0..MAX_SKILL``.
        """
        index = self._player_index(player_id)
        field_names = {f.name for f in dataclasses.fields(buckshot.Player)}
        unknown = set(changes) - field_names
        if unknown:
            raise ValueError(
                f"Unknown player field(s): {', '.join(sorted(unknown))}"
            )
        updated = dataclasses.replace(self.players[index], **changes)
        if not (0 <= updated.hp <= updated.max_hp):
            raise ValueError(
                f"hp must be 0-{updated.max_hp}, got {updated.hp}"
            )
        if not (0 <= updated.skill <= buckshot.MAX_SKILL):
            raise ValueError(
                f"skill must be 0-{buckshot.MAX_SKILL}, got {updated.skill}"
            )
        self.players = (
            self.players[:index] + [updated] + self.players[index + 1:]
        )

    # -----------------------------------------------------------------
    # Recalculation
    # -----------------------------------------------------------------

    def _sync_chambers(self) -> None:
        """Rebuild the sequence outside a round, then recompute."""
        if not self.round_active:
            total = self.total_shells
            if total == 0:
                self.chambers = []
            elif total != len(self.chambers):
                self.chambers = buckshot.initialize_chambers(total)
        self._recalculate()

    def _recalculate(self) -> None:
        if self.chambers:
            self.chambers = compute_probabilities.compute_chamber_probabilities(
                self.live_shells, self.blank_shells, self.chambers,
            )

    # -----------------------------------------------------------------
    # Display
    # -----------------------------------------------------------------

    def __str__(self) -> str:
        live_pct, blank_pct = self.probabilities
        status = (
            f"{_C.GREEN}ROUND ACTIVE{_C.RESET}" if self.round_active
            else f"{_C.DIM}SETUP{_C.RESET}"
        )
        lines = [
            f"{_C.BOLD}=== Buckshot Solver ==={_C.RESET}  {status}",
            f"Live:  {_C.RED}{self.live_shells:>2}{_C.RESET}"
            f"  ({live_pct:5.1f}%)",
            f"Blank: {_C.BLUE}{self.blank_shells:>2}{_C.RESET}"
            f"  ({blank_pct:5.1f}%)",
            "",
        ]

        if self.chambers:
            values_line, positions_line = buckshot.chamber_lines(self.chambers)
            lines.append("Chambers:")
            lines.append(f"  {values_line}")
            lines.append(f"  {positions_line}")
        else:
            lines.append(f"Chambers: {_C.DIM}(empty){_C.RESET}")
        lines.append("")

        recommendation = self.recommendation
        indent = "    "
        for player in self.players:
            if player.is_user:
                lines.append(f"{_C.BOLD}>>> {player}{_C.RESET}")
            elif player.id == recommendation.target_player_id:
                lines.append(f"{indent}{player}  {_C.ORANGE}◎ TARGET{_C.RESET}")
            else:
                lines.append(f"{indent}{player}")
        lines.append("")
        lines.append(f"Recommendation: {recommendation}")

        return "\n".join(lines)


def _check_shell_count(kind: str, value: int) -> None:
    if not (0 <= value <= buckshot.MAX_SHELLS):
        raise ValueError(
            f"{kind} shell count must be 0-{buckshot.MAX_SHELLS}, "
            f"got {value}"
        )
