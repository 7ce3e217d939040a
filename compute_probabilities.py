"""Probability engine for Buckshot Roulette.

Estimates, for every chamber in the firing order, the chance that the
shell it holds is live, given the number of live and blank shells loaded
and whichever chambers have already been inspected. Also ranks the
user's options for the turn from the aggregate odds.

Architecture:
    The per-chamber estimate is not a full posterior over shell orders.
    It follows a single greedy trajectory: known shells are removed from
    the pool up front, then each unknown chamber is assumed to take the
    more likely outcome (or half of each at exactly 50/50) before moving
    on. The pool entering each chamber along that path gives its
    estimate, and the pool entering its predecessor gives the
    conditional split.
"""

from __future__ import annotations

import dataclasses

import buckshot

_C = buckshot._Colors


# =============================================================================
# Aggregate Odds
# =============================================================================

def _percent(part: float, total: float) -> float:
    """``100 * part / total``, or 0 when there is nothing to draw from."""
    return (part / total) * 100 if total > 0 else 0.0


def calculate_probability(live: int, blank: int) -> tuple[float, float]:
    """Percent chance the next shell is live / blank, ignoring order.

    Args:
        live: Live shells left in the magazine.
        blank: Blank shells left in the magazine.

    Returns:
        ``(live_percent, blank_percent)``; both 0 for an empty magazine.
    """
    total = live + blank
    return _percent(live, total), _percent(blank, total)


# =============================================================================
# Chamber Probability Engine
# =============================================================================

def oracle_pool(
    live: int, blank: int, chambers: list[buckshot.Chamber],
) -> buckshot.PoolState:
    """Shells whose position is still unknown.

    Every known chamber is a fixed point in the firing order, so its
    shell is removed from the totals before anything else is estimated.

    Args:
        live: Total live shells across all chambers.
        blank: Total blank shells across all chambers.
        chambers: The chamber sequence in firing order.

    Returns:
        The unknown pool, clamped at zero.
    """
    known_live = sum(
        1 for c in chambers if c.state == buckshot.ShellState.KNOWN_LIVE
    )
    known_blank = sum(
        1 for c in chambers if c.state == buckshot.ShellState.KNOWN_BLANK
    )
    return buckshot.PoolState(
        live=float(max(0, live - known_live)),
        blank=float(max(0, blank - known_blank)),
    )


def greedy_trajectory(
    live: int, blank: int, chambers: list[buckshot.Chamber],
) -> list[buckshot.PoolState]:
    """Pool state entering each chamber along the most-likely path.

    Known chambers advance the timeline without consuming (their shells
    were already taken out by ``oracle_pool``). Each unknown chamber
    consumes one shell of its more likely kind; at exactly 50/50 it
    consumes half a shell of each.

    Args:
        live: Total live shells across all chambers.
        blank: Total blank shells across all chambers.
        chambers: The chamber sequence in firing order.

    Returns:
        One ``PoolState`` per chamber, aligned with ``chambers``.
    """
    pool = oracle_pool(live, blank, chambers)
    current_live, current_blank = pool.live, pool.blank

    history: list[buckshot.PoolState] = []
    for chamber in chambers:
        history.append(buckshot.PoolState(current_live, current_blank))
        if not chamber.is_unknown:
            continue

        total = current_live + current_blank
        p_live = current_live / total if total > 0 else 0.0
        if p_live > 0.5:
            current_live = max(0.0, current_live - 1)
        elif p_live < 0.5:
            current_blank = max(0.0, current_blank - 1)
        else:
            current_live = max(0.0, current_live - 0.5)
            current_blank = max(0.0, current_blank - 0.5)

    return history


def _conditional_split(prev: buckshot.PoolState) -> buckshot.ConditionalProbs:
    """Odds for a chamber under each outcome of the unknown one before it.

    Args:
        prev: Pool state that entered the previous chamber.
    """
    live_after_live = max(0.0, prev.live - 1)
    blank_after_blank = max(0.0, prev.blank - 1)
    return buckshot.ConditionalProbs(
        if_prev_live=_percent(live_after_live, live_after_live + prev.blank),
        if_prev_blank=_percent(prev.live, prev.live + blank_after_blank),
    )


def compute_chamber_probabilities(
    live: int, blank: int, chambers: list[buckshot.Chamber],
) -> list[buckshot.Chamber]:
    """Annotate every chamber with its estimated live percentage.

    Known-live chambers get 100, known-blank chambers 0. An unknown
    chamber gets the live share of the pool entering it on the greedy
    trajectory, plus a conditional split when the chamber right before
    it is also unknown. Never raises: an exhausted pool yields 0.

    The input chambers are left untouched.

    Args:
        live: Total live shells across all chambers.
        blank: Total blank shells across all chambers.
        chambers: The chamber sequence in firing order.

    Returns:
        New chambers with the same positions, states and order.
    """
    history = greedy_trajectory(live, blank, chambers)

    result: list[buckshot.Chamber] = []
    for i, chamber in enumerate(chambers):
        if chamber.state == buckshot.ShellState.KNOWN_LIVE:
            result.append(dataclasses.replace(
                chamber, probability=100.0, conditional_probs=None,
            ))
            continue
        if chamber.state == buckshot.ShellState.KNOWN_BLANK:
            result.append(dataclasses.replace(
                chamber, probability=0.0, conditional_probs=None,
            ))
            continue

        state = history[i]
        conditional = None
        if i > 0 and chambers[i - 1].is_unknown:
            conditional = _conditional_split(history[i - 1])
        result.append(dataclasses.replace(
            chamber,
            probability=_percent(state.live, state.total),
            conditional_probs=conditional,
        ))

    return result


# =============================================================================
# Move Recommendation
# =============================================================================

def _select_target(opponents: list[buckshot.Player]) -> buckshot.Player:
    """Most dangerous opponent, weakest first among equal threats.

    The first opponent wins a full tie.
    """
    best = opponents[0]
    for current in opponents[1:]:
        if current.skill > best.skill or (
            current.skill == best.skill and current.hp < best.hp
        ):
            best = current
    return best


def recommend_move(
    live: int, blank: int, opponents: list[buckshot.Player],
) -> buckshot.MoveRecommendation:
    """Pick the user's move from the aggregate odds.

    Shooting yourself with a blank keeps the turn, so it is the play
    whenever blanks outnumber lives. Otherwise shoot the highest-threat
    opponent, preferring the lowest hp among equals.

    Args:
        live: Live shells left in the magazine.
        blank: Blank shells left in the magazine.
        opponents: Living opponents (the caller filters out the user
            and anyone at 0 hp).

    Returns:
        A complete recommendation; never raises.
    """
    total = live + blank
    if total == 0:
        return buckshot.MoveRecommendation(
            action=buckshot.Action.RELOAD,
            description="RELOAD REQUIRED",
        )

    p_live = live / total
    p_blank = blank / total
    if p_blank > p_live:
        return buckshot.MoveRecommendation(
            action=buckshot.Action.SHOOT_SELF,
            description="SHOOT SELF (RISK FREE TURN)",
        )

    if not opponents:
        return buckshot.MoveRecommendation(
            action=buckshot.Action.WINNER,
            description="ALL OPPONENTS ELIMINATED",
        )

    target = _select_target(opponents)
    return buckshot.MoveRecommendation(
        action=buckshot.Action.SHOOT_OPPONENT,
        description=f"SHOOT {target.name.upper()}",
        target_player_id=target.id,
    )


# =============================================================================
# Terminal Display
# =============================================================================

def _prob_colored(percent: float) -> str:
    """Return a percentage string colored by which kind is favoured."""
    if percent >= 100:
        return f"{_C.RED}{_C.BOLD} 100%{_C.RESET}"
    if percent <= 0:
        return f"{_C.BLUE}{_C.BOLD}   0%{_C.RESET}"
    if percent > 50:
        return f"{_C.RED}{percent:>4.0f}%{_C.RESET}"
    if percent < 50:
        return f"{_C.BLUE}{percent:>4.0f}%{_C.RESET}"
    return f"{_C.MAGENTA}{percent:>4.0f}%{_C.RESET}"


def _state_label(state: buckshot.ShellState) -> str:
    if state == buckshot.ShellState.KNOWN_LIVE:
        return f"{_C.RED}known live{_C.RESET} "
    if state == buckshot.ShellState.KNOWN_BLANK:
        return f"{_C.BLUE}known blank{_C.RESET}"
    return f"{_C.DIM}unknown{_C.RESET}    "


def print_chamber_analysis(
    live: int, blank: int, chambers: list[buckshot.Chamber],
) -> None:
    """Print the per-chamber breakdown for the current magazine.

    Shows the aggregate odds, the unknown pool left after removing known
    shells, then one line per chamber with its estimate and, where
    present, the split on the previous chamber's outcome.

    Args:
        live: Live shells left in the magazine.
        blank: Blank shells left in the magazine.
        chambers: Chambers as returned by ``compute_chamber_probabilities``.
    """
    live_pct, blank_pct = calculate_probability(live, blank)
    print(
        f"Magazine: {_C.RED}{live} live{_C.RESET} "
        f"({live_pct:.1f}%) / {_C.BLUE}{blank} blank{_C.RESET} "
        f"({blank_pct:.1f}%)"
    )
    if not chambers:
        print(f"  {_C.DIM}(no chambers loaded){_C.RESET}")
        return

    pool = oracle_pool(live, blank, chambers)
    print(
        f"Unknown pool: {pool.live:g} live / {pool.blank:g} blank "
        f"across {sum(1 for c in chambers if c.is_unknown)} unknown "
        f"chamber(s)"
    )
    print()
    for chamber in chambers:
        line = (
            f"  {_C.BOLD}#{chamber.position:<2}{_C.RESET} "
            f"{_state_label(chamber.state)}  "
            f"{_prob_colored(chamber.probability)}"
        )
        split = chamber.conditional_probs
        if split is not None:
            line += (
                f"   {_C.DIM}prev live →{_C.RESET} "
                f"{_prob_colored(split.if_prev_live)}"
                f"  {_C.DIM}prev blank →{_C.RESET} "
                f"{_prob_colored(split.if_prev_blank)}"
            )
        print(line)


def print_recommendation(recommendation: buckshot.MoveRecommendation) -> None:
    """Print the recommended move as a single highlighted line."""
    print(f"{_C.BOLD}Recommendation:{_C.RESET} {recommendation}")
