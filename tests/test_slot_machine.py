# tests/test_slot_machine.py
import unittest
import sys
import os
import threading

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slot_engine.domain.events.event_dispatcher import EventDispatcher
from slot_engine.domain.events.spin_events import SpinEvent, SpinEventType
from slot_engine.domain.machine.entities.grid import Grid
from slot_engine.domain.machine.entities.line import Orientation
from slot_engine.domain.machine.entities.machine_config import MachineConfig
from slot_engine.domain.machine.entities.slot_machine import MachineState, SlotMachine
from slot_engine.domain.machine.entities.symbol import Symbol
from slot_engine.domain.machine.errors import (
    ConcurrentSpinError,
    ConfigurationError,
    UnknownSymbolError,
)
from slot_engine.infrastructure.rng.strategies.mersenne_rng import MersenneTwisterRNG


class TestSlotMachine(unittest.TestCase):
    """Test cases for the SlotMachine spin engine."""

    def setUp(self):
        self.raw_config = {
            "width": 5,
            "height": 3,
            "symbols": [
                {"name": "A", "multiplier": 1.0},
                {"name": "B", "multiplier": 2.0},
                {"name": "C", "multiplier": 0.5},
                {"name": "D", "multiplier": 0.25},
            ],
        }
        self.config = MachineConfig.from_dict(self.raw_config)
        self.machine = SlotMachine("test_machine", self.config, MersenneTwisterRNG(seed_value=12345))

    def grid(self, *rows):
        return Grid.from_names([row.split() for row in rows], self.config.catalog)

    def test_basic_construction(self):
        self.assertEqual(self.machine.id, "test_machine")
        self.assertEqual(self.machine.state, MachineState.IDLE)
        self.assertEqual(self.machine.spin_count, 0)

        info = self.machine.get_info()
        self.assertEqual(info["width"], 5)
        self.assertEqual(info["height"], 3)
        self.assertEqual(info["symbols"], ["A", "B", "C", "D"])

    def test_spin(self):
        result = self.machine.spin(2.0)

        self.assertEqual(result.spin_number, 1)
        self.assertEqual(result.grid.width, 5)
        self.assertEqual(result.grid.height, 3)
        self.assertEqual(result.bet, 2.0)
        self.assertGreaterEqual(result.total_multiplier, 0.0)
        self.assertAlmostEqual(result.total_multiplier, result.line_multiplier + result.bonus_multiplier)
        self.assertAlmostEqual(result.win, 2.0 * result.total_multiplier)
        self.assertEqual(self.machine.state, MachineState.IDLE)

    def test_spin_numbers_increase(self):
        numbers = [self.machine.spin(1.0).spin_number for _ in range(3)]
        self.assertEqual(numbers, [1, 2, 3])
        self.assertEqual(self.machine.spin_count, 3)

    def test_seeded_machines_agree(self):
        other = SlotMachine("other", self.config, MersenneTwisterRNG(seed_value=12345))
        for _ in range(5):
            self.assertEqual(self.machine.spin(1.0).grid, other.spin(1.0).grid)

    def test_negative_bet(self):
        with self.assertRaises(ValueError):
            self.machine.spin(-1.0)

    def test_spin_without_rng(self):
        machine = SlotMachine("no_rng", self.config)
        with self.assertRaises(ConfigurationError):
            machine.spin(1.0)

    def test_evaluate_reference_grid(self):
        """One three-run of A on a 5x3 grid pays 1.0 * 0.2 and no bonus."""
        grid = self.grid(
            "A A A B B",
            "C D C D C",
            "D C D C D",
        )
        result = self.machine.evaluate(grid, bet=10.0)

        self.assertEqual(len(result.lines), 1)
        line = result.lines[0]
        self.assertEqual((line.symbol.name, line.run_length), ("A", 3))
        self.assertEqual(result.tally, {"A": 3})
        self.assertAlmostEqual(result.line_multiplier, 0.2)
        self.assertEqual(result.bonus_multiplier, 0.0)
        self.assertAlmostEqual(result.total_multiplier, 0.2)
        self.assertAlmostEqual(result.win, 2.0)

    def test_result_tally_is_read_only(self):
        result = self.machine.evaluate(self.grid("A A A B B", "C D C D C", "D C D C D"))

        with self.assertRaises(TypeError):
            result.tally["A"] = 99
        self.assertEqual(result.tally, {"A": 3})
        self.assertEqual(result.to_dict()["tally"], {"A": 3})
        self.assertIsInstance(result.to_dict()["tally"], dict)

    def test_evaluate_losing_grid(self):
        grid = self.grid(
            "A B C D A",
            "A C D A B",
            "B D A B C",
        )
        result = self.machine.evaluate(grid, bet=1.0)

        self.assertEqual(result.lines, ())
        self.assertEqual(result.tally, {})
        self.assertEqual(result.total_multiplier, 0.0)
        self.assertFalse(result.is_win)

    def test_evaluate_uniform_grid(self):
        grid = self.grid(
            "A A A A A",
            "A A A A A",
            "A A A A A",
        )
        result = self.machine.evaluate(grid, bet=1.0)

        vertical = [l for l in result.lines if l.orientation is Orientation.VERTICAL]
        horizontal = [l for l in result.lines if l.orientation is Orientation.HORIZONTAL]
        self.assertEqual(len(vertical), 5)
        self.assertEqual(len(horizontal), 3)
        self.assertEqual(result.tally, {"A": 30})
        # 5 columns * 0.2 + 3 rows * 0.8
        self.assertAlmostEqual(result.line_multiplier, 3.4)
        # 30 cells at the top tier
        self.assertAlmostEqual(result.bonus_multiplier, 30000.0)
        self.assertGreater(result.line_multiplier, 0)
        self.assertGreater(result.bonus_multiplier, 0)

    def test_evaluate_unknown_symbol_resets_state(self):
        a = self.config.catalog.resolve("A")
        grid = Grid.from_rows([[a] * 5, [a] * 5, [a, a, a, a, Symbol("Z", 1.0)]])

        with self.assertRaises(UnknownSymbolError):
            self.machine.evaluate(grid)

        self.assertEqual(self.machine.state, MachineState.IDLE)
        self.machine.spin(1.0)

    def test_reentrant_spin_rejected(self):
        """A spin started from inside a running spin fails; the running one completes intact."""
        machine = self.machine
        attempts = []

        class ReentrantRNG(MersenneTwisterRNG):
            def get_random_int(self, min_val, max_val):
                if not attempts:
                    attempts.append(machine.state)
                    try:
                        machine.spin(1.0)
                    except ConcurrentSpinError as e:
                        attempts.append(e)
                return super().get_random_int(min_val, max_val)

        machine.set_rng(ReentrantRNG(seed_value=777))
        result = machine.spin(1.0)

        self.assertEqual(attempts[0], MachineState.EVALUATING)
        self.assertIsInstance(attempts[1], ConcurrentSpinError)
        self.assertEqual(result.spin_number, 1)

        reference = SlotMachine("reference", self.config, MersenneTwisterRNG(seed_value=777))
        self.assertEqual(result.grid, reference.spin(1.0).grid)
        self.assertEqual(machine.state, MachineState.IDLE)

    def test_spin_from_other_thread_rejected(self):
        entered = threading.Event()
        release = threading.Event()

        class BlockingRNG(MersenneTwisterRNG):
            def get_random_int(self, min_val, max_val):
                if not entered.is_set():
                    entered.set()
                    release.wait(timeout=5)
                return super().get_random_int(min_val, max_val)

        self.machine.set_rng(BlockingRNG(seed_value=1))
        results = []
        worker = threading.Thread(target=lambda: results.append(self.machine.spin(1.0)))
        worker.start()
        try:
            self.assertTrue(entered.wait(timeout=5))
            with self.assertRaises(ConcurrentSpinError):
                self.machine.spin(1.0)
            with self.assertRaises(ConcurrentSpinError):
                self.machine.evaluate(self.grid("A B C D A", "A C D A B", "B D A B C"))
        finally:
            release.set()
            worker.join(timeout=5)

        self.assertEqual(len(results), 1)
        self.assertEqual(self.machine.spin_count, 1)
        self.assertEqual(self.machine.state, MachineState.IDLE)


class TestSlotMachineEvents(unittest.TestCase):
    """Test cases for spin events."""

    def setUp(self):
        self.config = MachineConfig.from_dict({
            "symbols": [
                {"name": "A", "multiplier": 1.0},
                {"name": "B", "multiplier": 2.0},
                {"name": "C", "multiplier": 0.5},
                {"name": "D", "multiplier": 0.25},
            ],
            "big_win_multiplier": 10,
        })
        self.dispatcher = EventDispatcher()
        self.events = []
        self.dispatcher.register_for_class(SpinEvent, self.events.append)
        self.machine = SlotMachine("evented", self.config, MersenneTwisterRNG(seed_value=5),
                                   self.dispatcher)

    def grid(self, *rows):
        return Grid.from_names([row.split() for row in rows], self.config.catalog)

    def test_spin_completed(self):
        result = self.machine.spin(1.0)

        self.assertEqual(self.events[0].type, SpinEventType.SPIN_COMPLETED)
        self.assertIs(self.events[0].result, result)
        self.assertEqual(self.events[0].data["machine_id"], "evented")
        self.assertEqual(self.events[0].data["spin_number"], 1)

    def test_big_win(self):
        big = self.grid("A A A A A", "A A A A A", "A A A A A")
        self.machine.evaluate(big, bet=1.0)

        self.assertEqual([e.type for e in self.events],
                         [SpinEventType.SPIN_COMPLETED, SpinEventType.BIG_WIN])

    def test_no_big_win_for_small_payout(self):
        small = self.grid("A A A B B", "C D C D C", "D C D C D")
        self.machine.evaluate(small, bet=1.0)

        self.assertEqual([e.type for e in self.events], [SpinEventType.SPIN_COMPLETED])

    def test_handler_may_spin_again(self):
        """Events fire after the machine is idle, so an autoplay handler can spin."""
        follow_ups = []

        def autoplay(event):
            if not follow_ups:
                follow_ups.append(event)
                self.machine.spin(1.0)

        self.dispatcher.register(SpinEventType.SPIN_COMPLETED, autoplay)
        self.machine.spin(1.0)

        self.assertEqual(len(follow_ups), 1)
        self.assertEqual(self.machine.spin_count, 2)

    def test_failing_handler_does_not_break_spin(self):
        def broken(event):
            raise RuntimeError("renderer crashed")

        self.dispatcher.register(SpinEventType.SPIN_COMPLETED, broken)
        small = self.grid("A A A B B", "C D C D C", "D C D C D")
        with self.assertLogs("domain.events.dispatcher", level="ERROR"):
            result = self.machine.evaluate(small, bet=1.0)

        self.assertEqual(result.spin_number, 1)
        self.assertEqual(len(self.events), 1)

    def test_unregister(self):
        self.assertTrue(self.dispatcher.unregister_for_class(SpinEvent, self.events.append))
        self.assertFalse(self.dispatcher.unregister(SpinEventType.BIG_WIN, self.events.append))

        self.machine.spin(1.0)
        self.assertEqual(self.events, [])


if __name__ == "__main__":
    unittest.main()
