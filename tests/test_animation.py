from __future__ import annotations

import unittest

from hanoi_trial.animation import (
    AnimationSequencer,
    AnimationTimings,
    MoveInFlight,
    MoveOutcome,
    Phase,
)
from hanoi_trial.board import Board, Peg
from hanoi_trial.progress import Move
from hanoi_trial.scheduler import ManualScheduler

TIMINGS = AnimationTimings(travel_s=0.25, drop_s=0.5, step_pause_s=0.125)


class TestAnimationSequencer(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = ManualScheduler()
        self.settled: list[Move] = []
        self.changes = 0
        self.sequencer = AnimationSequencer(
            self.scheduler,
            timings=TIMINGS,
            on_settled=self.settled.append,
            on_change=self._count_change,
        )
        self.board = Board.initial(3)
        self.sequencer.attach(self.board)

    def _count_change(self) -> None:
        self.changes += 1

    def test_phases_run_in_order(self) -> None:
        self.assertTrue(self.sequencer.lift(Peg.A))
        self.assertIs(self.sequencer.phase, Phase.LIFTED)
        self.assertEqual(self.sequencer.flight.disk, 1)
        self.assertEqual(self.board.stack(Peg.A), (3, 2, 1))

        self.assertIs(self.sequencer.drop(Peg.C), MoveOutcome.STARTED)
        self.assertIs(self.sequencer.phase, Phase.TRANSITING)
        self.assertEqual(self.sequencer.flight.target, Peg.C)
        self.assertEqual(self.sequencer.flight.rendered_peg, Peg.A)
        self.assertEqual(self.board.stack(Peg.A), (3, 2, 1))

        self.scheduler.advance(0.125)
        self.assertIs(self.sequencer.phase, Phase.TRANSITING)

        self.scheduler.advance(0.125)
        self.assertIs(self.sequencer.phase, Phase.SETTLING)
        self.assertEqual(self.sequencer.flight.rendered_peg, Peg.C)
        self.assertEqual(self.board.stack(Peg.A), (3, 2))
        self.assertEqual(self.board.stack(Peg.C), (1,))
        self.assertEqual(self.settled, [])

        self.scheduler.advance(0.5)
        self.assertIs(self.sequencer.phase, Phase.IDLE)
        self.assertIsNone(self.sequencer.flight)
        self.assertEqual(self.settled, [Move(Peg.A, Peg.C, 1)])
        self.assertEqual(self.changes, 4)

    def test_same_peg_deselects(self) -> None:
        self.sequencer.lift(Peg.A)
        self.assertIs(self.sequencer.drop(Peg.A), MoveOutcome.DESELECTED)
        self.assertIs(self.sequencer.phase, Phase.IDLE)
        self.assertEqual(self.scheduler.pending(), 0)

    def test_lifting_same_peg_twice_deselects(self) -> None:
        self.assertTrue(self.sequencer.lift(Peg.A))
        self.assertFalse(self.sequencer.lift(Peg.A))
        self.assertIs(self.sequencer.phase, Phase.IDLE)

    def test_lifting_empty_peg_does_nothing(self) -> None:
        self.assertFalse(self.sequencer.lift(Peg.B))
        self.assertIs(self.sequencer.phase, Phase.IDLE)

    def test_invalid_drop_returns_to_idle(self) -> None:
        self.sequencer.run(Peg.A, Peg.B)
        self.scheduler.run_until_idle()
        before = self.board.snapshot()

        self.assertTrue(self.sequencer.lift(Peg.A))  # disk 2
        self.assertIs(self.sequencer.drop(Peg.B), MoveOutcome.INVALID)
        self.assertIs(self.sequencer.phase, Phase.IDLE)
        self.assertEqual(self.scheduler.pending(), 0)
        self.assertEqual(self.board.snapshot(), before)
        self.assertEqual(len(self.settled), 1)

    def test_drop_without_lift_is_rejected(self) -> None:
        self.assertIs(self.sequencer.drop(Peg.B), MoveOutcome.REJECTED)

    def test_no_second_move_while_in_flight(self) -> None:
        self.assertIs(self.sequencer.run(Peg.A, Peg.C), MoveOutcome.STARTED)
        self.assertTrue(self.sequencer.is_busy)
        self.assertFalse(self.sequencer.lift(Peg.A))
        self.assertIs(self.sequencer.run(Peg.A, Peg.B), MoveOutcome.REJECTED)
        self.scheduler.advance(0.25)
        self.assertFalse(self.sequencer.lift(Peg.A))
        self.scheduler.advance(0.5)
        self.assertTrue(self.sequencer.lift(Peg.A))

    def test_cancel_while_transiting_leaves_board_alone(self) -> None:
        self.sequencer.run(Peg.A, Peg.C)
        self.scheduler.advance(0.125)
        self.sequencer.cancel()
        self.assertIs(self.sequencer.phase, Phase.IDLE)
        self.scheduler.advance(10)
        self.assertEqual(self.board.stack(Peg.A), (3, 2, 1))
        self.assertEqual(self.settled, [])

    def test_cancel_while_settling_can_finish_the_move(self) -> None:
        self.sequencer.run(Peg.A, Peg.C)
        self.scheduler.advance(0.25)
        self.sequencer.cancel(finish_settling=True)
        self.assertEqual(self.settled, [Move(Peg.A, Peg.C, 1)])
        self.scheduler.advance(10)
        self.assertEqual(self.settled, [Move(Peg.A, Peg.C, 1)])
        self.assertEqual(self.board.stack(Peg.C), (1,))

    def test_attach_discards_moves_on_the_old_board(self) -> None:
        self.sequencer.run(Peg.A, Peg.C)
        fresh = Board.initial(3)
        self.sequencer.attach(fresh)
        self.scheduler.advance(10)
        self.assertEqual(self.board.stack(Peg.A), (3, 2, 1))
        self.assertEqual(fresh.stack(Peg.A), (3, 2, 1))
        self.assertEqual(self.settled, [])
        self.assertIs(self.sequencer.board, fresh)

    def test_flight_without_target_has_no_move(self) -> None:
        self.sequencer.lift(Peg.A)
        flight = self.sequencer.flight
        self.assertIsInstance(flight, MoveInFlight)
        self.assertIsNone(flight.target)
        with self.assertRaises(ValueError):
            flight.as_move()

        self.sequencer.drop(Peg.C)
        self.assertEqual(self.sequencer.flight.as_move(), Move(Peg.A, Peg.C, 1))
        self.scheduler.advance(0.25)
        self.assertEqual(self.board.stack(Peg.C), (1,))


class TestAnimationTimings(unittest.TestCase):
    def test_defaults_and_ms_conversion(self) -> None:
        self.assertEqual(AnimationTimings(), AnimationTimings(0.3, 0.3, 0.1))
        timings = AnimationTimings.from_ms(travel_ms=250, drop_ms=500, step_pause_ms=125)
        self.assertEqual(timings, TIMINGS)
        self.assertEqual(timings.move_s, 0.75)

    def test_rejects_negative_or_non_numeric(self) -> None:
        with self.assertRaises(ValueError):
            AnimationTimings(travel_s=-1)
        with self.assertRaises(TypeError):
            AnimationTimings(drop_s="fast")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
