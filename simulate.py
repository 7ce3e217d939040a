"""Simulation script for Buckshot Solver chamber analysis.

Loads a shuffled magazine with ``RoundTracker.load_magazine()`` and
fires it shell by shell, printing the table, the per-chamber estimates
and the recommended move before every shot. A Burner Phone reveals one
chamber partway through the magazine.

At the end, reports how often the front chamber's greedy estimate
called the right shell kind.
"""

import buckshot
import compute_probabilities
import round_tracker

_C = buckshot._Colors

LIVE_SHELLS = 4
BLANK_SHELLS = 4
SEED = 7
# Shot after which the Burner Phone reveals the last chamber.
BURNER_PHONE_AFTER = 2


# =============================================================================
# Metrics
# =============================================================================

class EstimateMetrics:
    """Track how well the front-chamber estimate predicted each shot."""

    def __init__(self) -> None:
        self.calls: list[bool] = []
        self.coin_flips = 0

    def record(self, probability: float, shell: buckshot.ShellType) -> None:
        """Record one shot. A 50% estimate counts as a coin flip, not a call."""
        if probability == 50:
            self.coin_flips += 1
            return
        predicted_live = probability > 50
        self.calls.append(predicted_live == (shell == buckshot.ShellType.LIVE))

    @property
    def hit_rate(self) -> float:
        if not self.calls:
            return 0.0
        return sum(self.calls) / len(self.calls)


# ── Main ────────────────────────────────────────────────────

def main() -> None:
    """Fire a seeded 4 live / 4 blank magazine from front to back."""
    tracker, firing_order = round_tracker.RoundTracker.load_magazine(
        LIVE_SHELLS, BLANK_SHELLS, seed=SEED,
    )
    metrics = EstimateMetrics()

    shot = 0
    while firing_order:
        shot += 1
        print("=" * 60)
        print(f"Shot {shot}")
        print("=" * 60)
        print(tracker)
        print()
        compute_probabilities.print_chamber_analysis(
            tracker.live_shells, tracker.blank_shells, tracker.chambers,
        )
        print()

        front = tracker.chambers[0]
        shell = firing_order.pop(0)
        if front.is_unknown:
            metrics.record(front.probability, shell)
        print(
            f"Fired: {shell.ansi()}{_C.BOLD}{shell.name}{_C.RESET} "
            f"(estimate {front.probability:.0f}% live)"
        )
        tracker.fire(shell)

        if shot == BURNER_PHONE_AFTER and len(firing_order) > 1:
            position = len(firing_order)
            revealed = firing_order[-1]
            tracker.mark_shell(position, revealed.known_state)
            print(
                f"Burner Phone: chamber #{position} is "
                f"{revealed.ansi()}{revealed.name}{_C.RESET}"
            )
        print()

    print(tracker)
    print()
    print(
        f"Greedy calls: {sum(metrics.calls)}/{len(metrics.calls)} correct "
        f"({metrics.hit_rate:.0%}), {metrics.coin_flips} coin flip(s)"
    )


if __name__ == "__main__":
    main()
