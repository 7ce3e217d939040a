"""Buckshot Roulette game model.

Core types describing a loaded shotgun and the people around the table:
chamber slots with their reveal state, probability annotations, and
players with health and threat level. Also provides a shorthand notation
parser for entering a chamber sequence quickly in calculator mode, and
the terminal rendering shared by the solver and the example scripts.
"""

from __future__ import annotations

import dataclasses
import enum


# Hard limits mirrored from the physical game table.
MAX_SHELLS = 16
MAX_PLAYERS = 4
MAX_SKILL = 5


# =============================================================================
# ANSI Color Constants
# =============================================================================

class _Colors:
    """ANSI escape codes for terminal coloring."""
    BLUE = "\033[94m"
    RED = "\033[91m"
    MAGENTA = "\033[95m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    ORANGE = "\033[38;5;208m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


# =============================================================================
# Enums
# =============================================================================

class ShellState(enum.Enum):
    """What is known about the shell sitting in a chamber.

    KNOWN_LIVE / KNOWN_BLANK are set when the shell was inspected before
    being fired (Magnifying Glass, Burner Phone).
    """
    UNKNOWN = enum.auto()
    KNOWN_LIVE = enum.auto()
    KNOWN_BLANK = enum.auto()

    @property
    def is_known(self) -> bool:
        return self is not ShellState.UNKNOWN


class ShellType(enum.Enum):
    """The true kind of a shell."""
    LIVE = enum.auto()
    BLANK = enum.auto()

    def ansi(self) -> str:
        """Returns the ANSI color code for this shell type."""
        return {
            ShellType.LIVE: _Colors.RED,
            ShellType.BLANK: _Colors.BLUE,
        }[self]

    @property
    def known_state(self) -> ShellState:
        """The chamber state recorded once this shell has been inspected."""
        if self is ShellType.LIVE:
            return ShellState.KNOWN_LIVE
        return ShellState.KNOWN_BLANK


class Action(enum.Enum):
    """Move the solver can recommend for the user's turn."""
    SHOOT_SELF = enum.auto()
    SHOOT_OPPONENT = enum.auto()
    RELOAD = enum.auto()
    WINNER = enum.auto()


# =============================================================================
# Chambers
# =============================================================================

@dataclasses.dataclass(frozen=True)
class ConditionalProbs:
    """Live odds of a chamber under each outcome of the chamber before it.

    Only attached when both this chamber and its predecessor are unknown.

    Attributes:
        if_prev_live: Percent chance this chamber is live if the previous
            unknown shell turns out live.
        if_prev_blank: Percent chance this chamber is live if the previous
            unknown shell turns out blank.
    """
    if_prev_live: float
    if_prev_blank: float


@dataclasses.dataclass(frozen=True)
class PoolState:
    """Live/blank counts entering a chamber on the greedy trajectory.

    Counts are floats because an exact 50/50 chamber consumes half a
    shell of each kind.
    """
    live: float
    blank: float

    @property
    def total(self) -> float:
        return self.live + self.blank


@dataclasses.dataclass(frozen=True)
class Chamber:
    """One slot in the firing order.

    Attributes:
        position: 1-based rank in the firing order (1 is fired next).
        state: What is known about the shell in this chamber.
        probability: Estimated percent chance (0-100) that the shell is
            live. Always 100 for KNOWN_LIVE and 0 for KNOWN_BLANK once
            the engine has run.
        conditional_probs: Split estimate keyed on the previous chamber's
            outcome, or None.
    """
    position: int
    state: ShellState = ShellState.UNKNOWN
    probability: float = 50.0
    conditional_probs: ConditionalProbs | None = None

    @property
    def is_unknown(self) -> bool:
        return self.state == ShellState.UNKNOWN

    def cell_label(self) -> tuple[str, str]:
        """Return the (plain, colored) label for a timeline cell.

        Known shells show ``L`` or ``B``; unknown shells show their
        rounded live percentage, or ``a/b`` when a conditional split is
        attached.
        """
        if self.state == ShellState.KNOWN_LIVE:
            return "L", f"{_Colors.RED}{_Colors.BOLD}L{_Colors.RESET}"
        if self.state == ShellState.KNOWN_BLANK:
            return "B", f"{_Colors.BLUE}{_Colors.BOLD}B{_Colors.RESET}"
        if self.conditional_probs is not None:
            a = round(self.conditional_probs.if_prev_live)
            b = round(self.conditional_probs.if_prev_blank)
            plain = f"{a}/{b}"
            colored = (
                f"{_probability_color(a)}{a}{_Colors.RESET}"
                f"{_Colors.DIM}/{_Colors.RESET}"
                f"{_probability_color(b)}{b}{_Colors.RESET}"
            )
            return plain, colored
        plain = f"{round(self.probability)}"
        return plain, f"{_probability_color(self.probability)}{plain}{_Colors.RESET}"

    def __str__(self) -> str:
        _, colored = self.cell_label()
        return f"#{self.position} {colored}"


def _probability_color(probability: float) -> str:
    """Red for likely live, blue for likely blank, magenta for a coin flip."""
    if probability > 50:
        return _Colors.RED
    if probability < 50:
        return _Colors.BLUE
    return _Colors.MAGENTA


def initialize_chambers(total: int) -> list[Chamber]:
    """Create ``total`` fresh unknown chambers numbered from 1.

    Args:
        total: Number of shells loaded.

    Returns:
        A list of unknown chambers, each at the neutral 50% estimate.
    """
    return [Chamber(position=i + 1) for i in range(total)]


def renumber_chambers(chambers: list[Chamber]) -> list[Chamber]:
    """Return the chambers renumbered contiguously from 1, order kept."""
    return [
        dataclasses.replace(c, position=i + 1)
        for i, c in enumerate(chambers)
    ]


# =============================================================================
# Chamber Notation
# =============================================================================

_STATE_TOKENS = {
    "?": ShellState.UNKNOWN,
    "L": ShellState.KNOWN_LIVE,
    "B": ShellState.KNOWN_BLANK,
}


def _parse_chamber_token(token: str, position: int) -> Chamber:
    """Parse a single shorthand token into a Chamber.

    Token formats (case-insensitive):
        ?     UNKNOWN shell
        L     KNOWN_LIVE shell
        B     KNOWN_BLANK shell

    Raises:
        ValueError: If the token is not one of the formats above.
    """
    state = _STATE_TOKENS.get(token.upper())
    if state is None:
        raise ValueError(
            f"Invalid chamber token {token!r} at position {position}. "
            f"Expected one of '?', 'L', 'B'."
        )
    return Chamber(position=position, state=state)


def parse_chambers(notation: str, sep: str = " ") -> list[Chamber]:
    """Create a chamber sequence from shorthand string notation.

    Tokens are separated by ``sep`` and listed in firing order::

        parse_chambers("? L ? ? B")

    Args:
        notation: The shorthand string describing the chambers.
        sep: Token separator (default ``" "``).

    Returns:
        Chambers numbered from 1 in the order given, with the default
        50% estimate (run the engine to fill in probabilities).

    Raises:
        ValueError: If the notation is empty or a token is invalid.
    """
    if not notation or not notation.strip():
        raise ValueError("Notation string is empty")
    tokens = [t for t in notation.split(sep) if t]
    if not tokens:
        raise ValueError("Notation string contains no tokens")
    return [_parse_chamber_token(t, i + 1) for i, t in enumerate(tokens)]


def chambers_to_string(chambers: list[Chamber], sep: str = " ") -> str:
    """Inverse of ``parse_chambers``: render reveal states as notation."""
    symbols = {state: token for token, state in _STATE_TOKENS.items()}
    return sep.join(symbols[c.state] for c in chambers)


def chamber_lines(chambers: list[Chamber]) -> tuple[str, str]:
    """Return the two display lines for a timeline: values and positions.

    Each cell is padded to the widest label so conditional splits like
    ``33/67`` stay aligned with their position numbers.

    Returns:
        A tuple of (values_line, positions_line).
    """
    if not chambers:
        return "", ""
    labels = [c.cell_label() for c in chambers]
    cell = max(
        max(len(plain) for plain, _ in labels),
        max(len(f"#{c.position}") for c in chambers),
    ) + 1
    value_parts: list[str] = []
    position_parts: list[str] = []
    for chamber, (plain, colored) in zip(chambers, labels):
        value_parts.append(" " * (cell - len(plain)) + colored)
        tag = f"#{chamber.position}"
        position_parts.append(
            " " * (cell - len(tag)) + f"{_Colors.DIM}{tag}{_Colors.RESET}"
        )
    return "".join(value_parts), "".join(position_parts)


# =============================================================================
# Players
# =============================================================================

@dataclasses.dataclass
class Player:
    """Someone sitting at the table.

    Attributes:
        id: Stable identifier, unique within a table.
        name: Display name.
        hp: Current charges (health).
        max_hp: Charges at full health.
        skill: Threat level from 0 (harmless) to ``MAX_SKILL``.
        is_user: True for the person the solver advises.
    """
    id: int
    name: str
    hp: int
    max_hp: int = 4
    skill: int = 1
    is_user: bool = False

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def __str__(self) -> str:
        hearts = (
            f"{_Colors.GREEN}{'♥' * self.hp}{_Colors.RESET}"
            f"{_Colors.DIM}{'·' * max(0, self.max_hp - self.hp)}{_Colors.RESET}"
        )
        stars = (
            f"{_Colors.YELLOW}{'★' * self.skill}{_Colors.RESET}"
            f"{_Colors.DIM}{'☆' * max(0, MAX_SKILL - self.skill)}{_Colors.RESET}"
        )
        name = f"{_Colors.BOLD}{self.name}{_Colors.RESET}"
        if not self.is_alive:
            name = f"{_Colors.DIM}{self.name} ✗{_Colors.RESET}"
        if self.is_user:
            return f"{name}  {hearts}"
        return f"{name}  {hearts}  {stars}"


# =============================================================================
# Recommendation
# =============================================================================

@dataclasses.dataclass(frozen=True)
class MoveRecommendation:
    """The solver's suggested move for the user's turn.

    Attributes:
        action: What to do.
        description: Upper-case label shown to the user.
        target_player_id: Player to shoot for ``SHOOT_OPPONENT``.
    """
    action: Action
    description: str
    target_player_id: int | None = None

    def ansi(self) -> str:
        """Blue when the safe play is shooting yourself, orange otherwise."""
        if self.action == Action.SHOOT_SELF:
            return _Colors.BLUE
        return _Colors.ORANGE

    def __str__(self) -> str:
        return f"{self.ansi()}{_Colors.BOLD}{self.description}{_Colors.RESET}"
