"""Recursive producers and the visible call stack."""
import asyncio

import pytest

from playback.errors import InvalidParameterError
from playback.run import RunState
from producers.recursion import RecursionDomain, is_safe


def _frame_ids(timeline, run_id):
    seen = []
    for frame in timeline:
        if frame.run_id != run_id:
            continue
        for call in frame.view("call_stack"):
            if call.id not in seen:
                seen.append(call.id)
    return seen


class TestHanoi:
    @pytest.mark.asyncio
    async def test_three_disks_take_seven_moves(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        run = await play(controller, "hanoi")

        towers = [f.view("towers") for f in controller.timeline]
        changes = sum(1 for a, b in zip(towers, towers[1:]) if a != b)
        assert changes == 7
        assert controller.head.view("towers") == ((), (), (3, 2, 1))
        assert len(run.outcome.data["moves"]) == 7
        assert controller.result == "Solved Tower of Hanoi with 3 disks in 7 moves"

    @pytest.mark.asyncio
    async def test_larger_disks_never_rest_on_smaller(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        await play(controller, "hanoi", {"disks": 4})

        for frame in controller.timeline:
            for peg in frame.view("towers"):
                assert list(peg) == sorted(peg, reverse=True)
        assert controller.result.endswith("in 15 moves")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("disks", [1, 3, 5])
    async def test_start_frame_shows_requested_disks(self, make_controller, disks):
        controller = make_controller(RecursionDomain())
        run = controller.start("hanoi", {"disks": disks})
        start_frame = controller.timeline[-1]

        assert start_frame.run_id == run.id
        assert start_frame.seq == 0
        assert start_frame.view("towers") == (tuple(range(disks, 0, -1)), (), ())
        await controller.wait()
        assert controller.head.view("towers") == ((), (), tuple(range(disks, 0, -1)))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm,params", [
        ("hanoi", {"disks": 3.0}),
        ("factorial", {"n": 4.0}),
        ("nqueens", {"disks": 3}),
    ])
    async def test_refused_parameters_leave_state(self, make_controller, play, algorithm, params):
        controller = make_controller(RecursionDomain())
        await play(controller, "hanoi", {"disks": 2})
        head = controller.head

        with pytest.raises(InvalidParameterError):
            controller.start(algorithm, params)

        assert controller.head is head
        assert controller.result == "Solved Tower of Hanoi with 2 disks in 3 moves"
        assert controller.run.state == RunState.COMPLETED


class TestNQueens:
    def test_is_safe(self):
        board = [[0, 1, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
        assert not is_safe(board, 1, 1)
        assert not is_safe(board, 1, 0)
        assert not is_safe(board, 1, 2)
        assert is_safe(board, 1, 3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size,count", [(1, 1), (4, 2), (5, 10)])
    async def test_solution_counts(self, make_controller, play, size, count):
        controller = make_controller(RecursionDomain())
        run = await play(controller, "nqueens", {"size": size})
        assert len(run.outcome.data["solutions"]) == count
        assert controller.head.view("solutions") == count

    @pytest.mark.asyncio
    async def test_board_is_cleared_after_backtracking(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        await play(controller, "nqueens", {"size": 4})
        assert controller.head.view("board") == ((0,) * 4,) * 4


class TestCallStack:
    @pytest.mark.asyncio
    async def test_factorial(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        run = await play(controller, "factorial")
        assert controller.result == "5! = 120"

        depths = [len(f.view("call_stack")) for f in controller.timeline]
        assert max(depths) == 5
        assert _frame_ids(controller.timeline, run.id) == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_frames_complete_then_disappear(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        await play(controller, "factorial", {"n": 3})

        completed = [f for f in controller.timeline
                     if any(c.state == "completed" for c in f.view("call_stack"))]
        assert completed
        await asyncio.sleep(0.05)
        assert controller.head.view("call_stack") == ()
        assert controller.frames.pending == 0

    @pytest.mark.asyncio
    async def test_permutations(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        run = await play(controller, "permutation")
        assert run.outcome.data["permutations"] == ["ABC", "ACB", "BAC", "BCA", "CAB", "CBA"]
        assert controller.result == "Permutations: ABC, ACB, BAC, BCA, CAB, CBA"

    @pytest.mark.asyncio
    async def test_new_run_restarts_frame_ids(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        first = await play(controller, "factorial", {"n": 4})
        # removals from the first run are still pending here
        second = await play(controller, "factorial", {"n": 2})

        assert _frame_ids(controller.timeline, first.id) == [0, 1, 2, 3]
        assert _frame_ids(controller.timeline, second.id) == [0, 1]
        await asyncio.sleep(0.05)
        assert controller.head.run_id == second.id
        assert controller.head.view("call_stack") == ()

    @pytest.mark.asyncio
    async def test_cancelled_run_leaves_no_frames_for_the_next(self, make_controller, play):
        controller = make_controller(RecursionDomain())
        stop = []

        def cancel_deep(frame):
            if len(frame.view("call_stack")) == 3 and not stop:
                stop.append(controller.cancel())

        controller.subscribe(on_frame=cancel_deep)
        first = controller.start("factorial", {"n": 6})
        await controller.wait()
        assert first.state == RunState.CANCELLED

        await play(controller, "permutation", {"text": "AB"})
        await asyncio.sleep(0.05)
        assert all(c.function == "permute" for f in controller.timeline
                   if f.run_id != first.id for c in f.view("call_stack"))
        assert controller.head.view("call_stack") == ()
