"""
Recursive producers: Tower of Hanoi, N-Queens, factorial, permutations.

Python recursion drives the algorithm; what the viewer sees as the call stack
is the tracer's own list of CallFrame records, entered and exited explicitly
around each activation.
"""

from enum import Enum
from typing import List, Tuple

from playback.domain import Domain, RunContext
from playback.run import Outcome


PEGS = ("A", "B", "C")


class RecursionAlgorithm(str, Enum):
    HANOI = "hanoi"
    NQUEENS = "nqueens"
    FACTORIAL = "factorial"
    PERMUTATION = "permutation"


def _towers(pegs: List[List[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(peg) for peg in pegs)


def _board(board: List[List[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(row) for row in board)


async def hanoi(ctx: RunContext, _work) -> Outcome:
    step = ctx.step
    disks = ctx.params["disks"]
    pegs: List[List[int]] = [list(range(disks, 0, -1)), [], []]
    moves: List[Tuple[int, str, str]] = []

    async def solve(n: int, src: int, dst: int, aux: int) -> None:
        if n == 0:
            return
        async with ctx.frames.frame("hanoi", f"n={n}, {PEGS[src]} → {PEGS[dst]}"):
            await solve(n - 1, src, aux, dst)

            disk = pegs[src].pop()
            pegs[dst].append(disk)
            moves.append((disk, PEGS[src], PEGS[dst]))
            await step.emit(towers=_towers(pegs))

            await solve(n - 1, aux, dst, src)

    await step.emit(towers=_towers(pegs))
    await solve(disks, 0, 2, 1)
    return Outcome(
        summary=f"Solved Tower of Hanoi with {disks} disks in {len(moves)} moves",
        data={"moves": moves, "towers": _towers(pegs)},
    )


def is_safe(board: List[List[int]], row: int, col: int) -> bool:
    """No queen above in the same column or on either upward diagonal."""
    n = len(board)
    for i in range(row):
        if board[i][col]:
            return False
    i, j = row - 1, col - 1
    while i >= 0 and j >= 0:
        if board[i][j]:
            return False
        i, j = i - 1, j - 1
    i, j = row - 1, col + 1
    while i >= 0 and j < n:
        if board[i][j]:
            return False
        i, j = i - 1, j + 1
    return True


async def nqueens(ctx: RunContext, _work) -> Outcome:
    step = ctx.step
    size = ctx.params["size"]
    board = [[0] * size for _ in range(size)]
    solutions: List[Tuple[Tuple[int, ...], ...]] = []

    step.publish(board=_board(board), solutions=0)

    async def solve(row: int) -> None:
        if row == size:
            solutions.append(_board(board))
            await step.emit(2, board=_board(board), solutions=len(solutions))
            return

        async with ctx.frames.frame("solveNQueens", f"row={row}"):
            for col in range(size):
                if not is_safe(board, row, col):
                    continue
                board[row][col] = 1
                await step.emit(board=_board(board))

                await solve(row + 1)

                board[row][col] = 0
                await step.emit(0.5, board=_board(board))

    await solve(0)
    return Outcome(
        summary=f"Found {len(solutions)} solution(s) for {size}-Queens",
        data={"solutions": solutions},
    )


async def factorial(ctx: RunContext, _work) -> Outcome:
    n = ctx.params["n"]

    async def fact(k: int) -> int:
        async with ctx.frames.frame("factorial", f"n={k}"):
            if k in (0, 1):
                result = 1
            else:
                result = k * await fact(k - 1)
        return result

    value = await fact(n)
    return Outcome(summary=f"{n}! = {value}", data={"value": value})


async def permutation(ctx: RunContext, _work) -> Outcome:
    step = ctx.step
    text = ctx.params["text"]
    results: List[str] = []

    async def permute(remaining: str, prefix: str) -> None:
        async with ctx.frames.frame("permute", f'"{prefix}" + "{remaining}"'):
            if not remaining:
                results.append(prefix)
                step.publish(results=tuple(results))
            for i, char in enumerate(remaining):
                await permute(remaining[:i] + remaining[i + 1:], prefix + char)

    await permute(text, "")
    return Outcome(summary=f"Permutations: {', '.join(results)}", data={"permutations": results})


class RecursionDomain(Domain):
    name = "recursion"
    algorithms = RecursionAlgorithm
    producers = {
        RecursionAlgorithm.HANOI: hanoi,
        RecursionAlgorithm.NQUEENS: nqueens,
        RecursionAlgorithm.FACTORIAL: factorial,
        RecursionAlgorithm.PERMUTATION: permutation,
    }
    defaults = {
        RecursionAlgorithm.HANOI: {"disks": 3},
        RecursionAlgorithm.NQUEENS: {"size": 4},
        RecursionAlgorithm.FACTORIAL: {"n": 5},
        RecursionAlgorithm.PERMUTATION: {"text": "ABC"},
    }

    def initial_views(self, params=None):
        disks = (params or {}).get("disks", self.defaults[RecursionAlgorithm.HANOI]["disks"])
        return {
            "call_stack": (),
            "towers": _towers([list(range(disks, 0, -1)), [], []]),
            "board": (),
            "results": (),
        }
