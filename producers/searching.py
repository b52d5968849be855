import math
from enum import Enum
from typing import List, Optional, Sequence

from playback.domain import Domain, RunContext
from playback.entities import ArrayCell
from playback.run import Outcome


class SearchAlgorithm(str, Enum):
    LINEAR = "linear"
    BINARY = "binary"
    JUMP = "jump"


def _outcome(target: int, index: Optional[int]) -> Outcome:
    if index is None:
        return Outcome(summary=f"{target} not found", data={"index": None})
    return Outcome(summary=f"Found {target} at index {index}", data={"index": index})


async def linear_search(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step
    target = ctx.params["target"]

    for i in range(len(arr)):
        arr[i] = arr[i].with_state("searching")
        await step.emit(cells=tuple(arr))

        if arr[i].value == target:
            arr[i] = arr[i].with_state("found")
            step.publish(cells=tuple(arr))
            return _outcome(target, i)

        arr[i] = arr[i].with_state("not-found")
        step.publish(cells=tuple(arr))

    return _outcome(target, None)


async def binary_search(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step
    target = ctx.params["target"]
    left, right = 0, len(arr) - 1

    while left <= right:
        mid = (left + right) // 2

        for i in range(left, right + 1):
            arr[i] = arr[i].with_state("searching")
        await step.emit(cells=tuple(arr))

        if arr[mid].value == target:
            arr[:] = [
                cell.with_state("found") if i == mid
                else cell.with_state("not-found") if cell.state == "searching"
                else cell
                for i, cell in enumerate(arr)
            ]
            step.publish(cells=tuple(arr))
            return _outcome(target, mid)

        if arr[mid].value < target:
            discarded = range(left, mid + 1)
            left = mid + 1
        else:
            discarded = range(mid, right + 1)
            right = mid - 1
        for i in discarded:
            arr[i] = arr[i].with_state("not-found")
        await step.emit(cells=tuple(arr))

    return _outcome(target, None)


async def jump_search(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step
    target = ctx.params["target"]
    n = len(arr)
    block = max(1, int(math.isqrt(n)))
    prev = 0

    # skip whole blocks whose last value is still below the target
    while prev < n and arr[min(prev + block, n) - 1].value < target:
        end = min(prev + block, n)
        for i in range(prev, end):
            arr[i] = arr[i].with_state("searching")
        await step.emit(cells=tuple(arr))

        for i in range(prev, end):
            arr[i] = arr[i].with_state("not-found")
        prev += block
        step.publish(cells=tuple(arr))

    for i in range(prev, min(prev + block, n)):
        arr[i] = arr[i].with_state("searching")
        await step.emit(cells=tuple(arr))

        if arr[i].value == target:
            arr[i] = arr[i].with_state("found")
            step.publish(cells=tuple(arr))
            return _outcome(target, i)

        arr[i] = arr[i].with_state("not-found")
        step.publish(cells=tuple(arr))

    return _outcome(target, None)


class SearchingDomain(Domain):
    name = "searching"
    algorithms = SearchAlgorithm
    producers = {
        SearchAlgorithm.LINEAR: linear_search,
        SearchAlgorithm.BINARY: binary_search,
        SearchAlgorithm.JUMP: jump_search,
    }

    def __init__(self, values: Sequence[int] = ()):
        self.values = list(values)

    def load(self, values: Sequence[int]) -> None:
        self.values = list(values)

    def initial_views(self, params=None):
        return {"cells": tuple(ArrayCell(v) for v in self.values)}

    def working_copy(self) -> List[ArrayCell]:
        return [ArrayCell(v) for v in self.values]
