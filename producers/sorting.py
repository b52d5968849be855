"""
Comparison sorts over an array of ArrayCell.

Cells move through default -> comparing -> swapping -> sorted. Every
producer publishes the whole array as the ``cells`` view before each
suspension and leaves every cell ``sorted`` once it completes.
"""

from enum import Enum
from typing import List, Sequence

from playback.domain import Domain, RunContext
from playback.entities import ArrayCell
from playback.run import Outcome


class SortAlgorithm(str, Enum):
    BUBBLE = "bubble"
    QUICK = "quick"
    MERGE = "merge"
    INSERTION = "insertion"
    SELECTION = "selection"


NAMES = {
    SortAlgorithm.BUBBLE: "Bubble Sort",
    SortAlgorithm.QUICK: "Quick Sort",
    SortAlgorithm.MERGE: "Merge Sort",
    SortAlgorithm.INSERTION: "Insertion Sort",
    SortAlgorithm.SELECTION: "Selection Sort",
}


def _mark(arr: List[ArrayCell], state: str, *indices: int) -> None:
    for i in indices:
        arr[i] = arr[i].with_state(state)


def _finish(ctx: RunContext, arr: List[ArrayCell], algorithm: SortAlgorithm) -> Outcome:
    arr[:] = [cell.with_state("sorted") for cell in arr]
    ctx.step.publish(cells=tuple(arr))
    values = [cell.value for cell in arr]
    return Outcome(
        summary=f"Sorted {len(arr)} values with {NAMES[algorithm]}",
        data={"values": values},
    )


async def bubble_sort(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step
    n = len(arr)

    for i in range(n - 1):
        for j in range(n - i - 1):
            _mark(arr, "comparing", j, j + 1)
            await step.emit(cells=tuple(arr))

            if arr[j].value > arr[j + 1].value:
                _mark(arr, "swapping", j, j + 1)
                await step.emit(cells=tuple(arr))
                arr[j], arr[j + 1] = arr[j + 1], arr[j]

            _mark(arr, "default", j, j + 1)
            step.publish(cells=tuple(arr))

        _mark(arr, "sorted", n - i - 1)
        step.publish(cells=tuple(arr))

    return _finish(ctx, arr, SortAlgorithm.BUBBLE)


async def _partition(ctx: RunContext, arr: List[ArrayCell], low: int, high: int) -> int:
    """Lomuto partition around the last element."""
    step = ctx.step
    pivot = arr[high].value
    i = low - 1

    for j in range(low, high):
        _mark(arr, "comparing", j, high)
        await step.emit(cells=tuple(arr))

        if arr[j].value < pivot:
            i += 1
            _mark(arr, "swapping", i, j)
            await step.emit(cells=tuple(arr))
            arr[i], arr[j] = arr[j], arr[i]
            _mark(arr, "default", i)

        _mark(arr, "default", j)
        step.publish(cells=tuple(arr))

    _mark(arr, "swapping", i + 1, high)
    await step.emit(cells=tuple(arr))
    arr[i + 1], arr[high] = arr[high], arr[i + 1]

    _mark(arr, "default", high)
    _mark(arr, "sorted", i + 1)
    step.publish(cells=tuple(arr))
    return i + 1


async def _quick(ctx: RunContext, arr: List[ArrayCell], low: int, high: int) -> None:
    if low < high:
        pi = await _partition(ctx, arr, low, high)
        await _quick(ctx, arr, low, pi - 1)
        await _quick(ctx, arr, pi + 1, high)


async def quick_sort(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    await _quick(ctx, arr, 0, len(arr) - 1)
    return _finish(ctx, arr, SortAlgorithm.QUICK)


async def _merge(ctx: RunContext, arr: List[ArrayCell], left: int, mid: int, right: int) -> None:
    step = ctx.step
    left_part = arr[left:mid + 1]
    right_part = arr[mid + 1:right + 1]
    i = j = 0
    k = left

    while i < len(left_part) and j < len(right_part):
        _mark(arr, "comparing", k)
        await step.emit(cells=tuple(arr))

        # <= keeps equal keys in their original order
        if left_part[i].value <= right_part[j].value:
            arr[k] = left_part[i].with_state("swapping")
            i += 1
        else:
            arr[k] = right_part[j].with_state("swapping")
            j += 1
        await step.emit(cells=tuple(arr))
        _mark(arr, "default", k)
        k += 1

    for rest, start in ((left_part, i), (right_part, j)):
        for cell in rest[start:]:
            arr[k] = cell.with_state("default")
            await step.emit(cells=tuple(arr))
            k += 1


async def _merge_sort(ctx: RunContext, arr: List[ArrayCell], left: int, right: int) -> None:
    if left < right:
        mid = (left + right) // 2
        await _merge_sort(ctx, arr, left, mid)
        await _merge_sort(ctx, arr, mid + 1, right)
        await _merge(ctx, arr, left, mid, right)


async def merge_sort(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    await _merge_sort(ctx, arr, 0, len(arr) - 1)
    return _finish(ctx, arr, SortAlgorithm.MERGE)


async def insertion_sort(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step

    for i in range(1, len(arr)):
        key = arr[i]
        j = i - 1

        _mark(arr, "comparing", i)
        await step.emit(cells=tuple(arr))

        while j >= 0 and arr[j].value > key.value:
            _mark(arr, "swapping", j, j + 1)
            await step.emit(cells=tuple(arr))

            arr[j + 1] = arr[j].with_state("default")
            _mark(arr, "default", j)
            j -= 1
            step.publish(cells=tuple(arr))

        arr[j + 1] = key.with_state("default")
        step.publish(cells=tuple(arr))

    return _finish(ctx, arr, SortAlgorithm.INSERTION)


async def selection_sort(ctx: RunContext, arr: List[ArrayCell]) -> Outcome:
    step = ctx.step
    n = len(arr)

    for i in range(n - 1):
        min_idx = i
        _mark(arr, "comparing", min_idx)
        step.publish(cells=tuple(arr))

        for j in range(i + 1, n):
            _mark(arr, "comparing", j)
            await step.emit(cells=tuple(arr))

            # strict < keeps the first minimum found
            if arr[j].value < arr[min_idx].value:
                _mark(arr, "default", min_idx)
                min_idx = j
                _mark(arr, "comparing", min_idx)
            else:
                _mark(arr, "default", j)
            step.publish(cells=tuple(arr))

        if min_idx != i:
            _mark(arr, "swapping", i, min_idx)
            await step.emit(cells=tuple(arr))
            arr[i], arr[min_idx] = arr[min_idx], arr[i]

        _mark(arr, "sorted", i)
        if min_idx != i:
            _mark(arr, "default", min_idx)
        step.publish(cells=tuple(arr))

    return _finish(ctx, arr, SortAlgorithm.SELECTION)


class SortingDomain(Domain):
    name = "sorting"
    algorithms = SortAlgorithm
    producers = {
        SortAlgorithm.BUBBLE: bubble_sort,
        SortAlgorithm.QUICK: quick_sort,
        SortAlgorithm.MERGE: merge_sort,
        SortAlgorithm.INSERTION: insertion_sort,
        SortAlgorithm.SELECTION: selection_sort,
    }

    def __init__(self, values: Sequence[int] = ()):
        self.values = list(values)

    def load(self, values: Sequence[int]) -> None:
        self.values = list(values)

    def initial_views(self, params=None):
        return {"cells": tuple(ArrayCell(v) for v in self.values)}

    def working_copy(self) -> List[ArrayCell]:
        return [ArrayCell(v) for v in self.values]

    def commit(self, work: List[ArrayCell]) -> None:
        self.values = [cell.value for cell in work]
