"""Unit tests for the buckshot game model."""

import dataclasses
import unittest

from buckshot import (
    Action,
    Chamber,
    ConditionalProbs,
    MoveRecommendation,
    Player,
    PoolState,
    ShellState,
    ShellType,
    chamber_lines,
    chambers_to_string,
    initialize_chambers,
    parse_chambers,
    renumber_chambers,
)


class TestShellState(unittest.TestCase):
    """Tests for the ShellState and ShellType enums."""

    def test_is_known(self) -> None:
        self.assertFalse(ShellState.UNKNOWN.is_known)
        self.assertTrue(ShellState.KNOWN_LIVE.is_known)
        self.assertTrue(ShellState.KNOWN_BLANK.is_known)

    def test_known_state_for_shell_type(self) -> None:
        self.assertEqual(ShellType.LIVE.known_state, ShellState.KNOWN_LIVE)
        self.assertEqual(ShellType.BLANK.known_state, ShellState.KNOWN_BLANK)

    def test_action_member_count(self) -> None:
        self.assertEqual(len(Action), 4)


class TestChamber(unittest.TestCase):
    """Tests for the Chamber dataclass."""

    def test_defaults(self) -> None:
        c = Chamber(position=1)
        self.assertEqual(c.state, ShellState.UNKNOWN)
        self.assertEqual(c.probability, 50.0)
        self.assertIsNone(c.conditional_probs)
        self.assertTrue(c.is_unknown)

    def test_frozen(self) -> None:
        c = Chamber(position=1)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            c.position = 2  # type: ignore[misc]

    def test_cell_label_known(self) -> None:
        live = Chamber(position=1, state=ShellState.KNOWN_LIVE, probability=100.0)
        blank = Chamber(position=2, state=ShellState.KNOWN_BLANK, probability=0.0)
        self.assertEqual(live.cell_label()[0], "L")
        self.assertEqual(blank.cell_label()[0], "B")

    def test_cell_label_rounds_probability(self) -> None:
        c = Chamber(position=1, probability=66.6667)
        self.assertEqual(c.cell_label()[0], "67")

    def test_cell_label_with_split(self) -> None:
        c = Chamber(
            position=2,
            conditional_probs=ConditionalProbs(100 / 3, 200 / 3),
        )
        self.assertEqual(c.cell_label()[0], "33/67")

    def test_str_includes_position(self) -> None:
        self.assertIn("#3", str(Chamber(position=3)))


class TestPoolState(unittest.TestCase):
    """Tests for the PoolState dataclass."""

    def test_total(self) -> None:
        self.assertEqual(PoolState(1.5, 2.0).total, 3.5)


class TestChamberHelpers(unittest.TestCase):
    """Tests for initialize_chambers and renumber_chambers."""

    def test_initialize(self) -> None:
        chambers = initialize_chambers(4)
        self.assertEqual([c.position for c in chambers], [1, 2, 3, 4])
        self.assertTrue(all(c.is_unknown for c in chambers))

    def test_initialize_empty(self) -> None:
        self.assertEqual(initialize_chambers(0), [])

    def test_renumber_keeps_order_and_state(self) -> None:
        chambers = parse_chambers("? L B ?")[1:]
        renumbered = renumber_chambers(chambers)
        self.assertEqual([c.position for c in renumbered], [1, 2, 3])
        self.assertEqual(
            [c.state for c in renumbered],
            [ShellState.KNOWN_LIVE, ShellState.KNOWN_BLANK, ShellState.UNKNOWN],
        )


class TestParseChambers(unittest.TestCase):
    """Tests for chamber shorthand notation."""

    def test_basic(self) -> None:
        chambers = parse_chambers("? L B ?")
        self.assertEqual([c.position for c in chambers], [1, 2, 3, 4])
        self.assertEqual(
            [c.state for c in chambers],
            [
                ShellState.UNKNOWN,
                ShellState.KNOWN_LIVE,
                ShellState.KNOWN_BLANK,
                ShellState.UNKNOWN,
            ],
        )

    def test_case_insensitive(self) -> None:
        chambers = parse_chambers("l b")
        self.assertEqual(chambers[0].state, ShellState.KNOWN_LIVE)
        self.assertEqual(chambers[1].state, ShellState.KNOWN_BLANK)

    def test_extra_whitespace(self) -> None:
        self.assertEqual(len(parse_chambers("?  ?   L")), 3)

    def test_custom_separator(self) -> None:
        chambers = parse_chambers("?,L,B", sep=",")
        self.assertEqual(len(chambers), 3)

    def test_invalid_token(self) -> None:
        with self.assertRaises(ValueError):
            parse_chambers("? X ?")

    def test_empty(self) -> None:
        with self.assertRaises(ValueError):
            parse_chambers("")
        with self.assertRaises(ValueError):
            parse_chambers("   ")

    def test_to_string(self) -> None:
        self.assertEqual(chambers_to_string(parse_chambers("? l B")), "? L B")


class TestChamberLines(unittest.TestCase):
    """Tests for chamber_lines."""

    def test_empty(self) -> None:
        self.assertEqual(chamber_lines([]), ("", ""))

    def test_lines_mention_positions(self) -> None:
        values, positions = chamber_lines(parse_chambers("? L"))
        self.assertIn("#1", positions)
        self.assertIn("#2", positions)
        self.assertIn("L", values)


class TestPlayer(unittest.TestCase):
    """Tests for the Player dataclass."""

    def test_is_alive(self) -> None:
        self.assertTrue(Player(id=2, name="DEALER", hp=1).is_alive)
        self.assertFalse(Player(id=2, name="DEALER", hp=0).is_alive)

    def test_defaults(self) -> None:
        p = Player(id=3, name="OPPONENT 3", hp=2)
        self.assertEqual(p.max_hp, 4)
        self.assertEqual(p.skill, 1)
        self.assertFalse(p.is_user)

    def test_str_output(self) -> None:
        self.assertIn("DEALER", str(Player(id=2, name="DEALER", hp=3, skill=3)))
        self.assertIn("YOU", str(Player(id=1, name="YOU", hp=4, is_user=True)))


class TestMoveRecommendation(unittest.TestCase):
    """Tests for the MoveRecommendation dataclass."""

    def test_str_contains_description(self) -> None:
        rec = MoveRecommendation(
            action=Action.SHOOT_OPPONENT,
            description="SHOOT DEALER",
            target_player_id=2,
        )
        self.assertIn("SHOOT DEALER", str(rec))

    def test_default_target(self) -> None:
        rec = MoveRecommendation(action=Action.RELOAD, description="RELOAD REQUIRED")
        self.assertIsNone(rec.target_player_id)


if __name__ == "__main__":
    unittest.main()
