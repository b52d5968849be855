"""
Bottom-up dynamic programming tables.

Each producer fills a table of DPCell, moving every cell through
default -> computing -> computed and marking the answer cell ``result``.
"""

from enum import Enum
from typing import List

from playback.domain import Domain, RunContext
from playback.entities import UNREACHABLE, DPCell
from playback.run import Outcome


class DPAlgorithm(str, Enum):
    FIBONACCI = "fibonacci"
    KNAPSACK = "knapsack"
    LCS = "lcs"
    COIN_CHANGE = "coinchange"


Table = List[List[DPCell]]


def _snapshot(table: Table):
    return tuple(tuple(row) for row in table)


async def _compute(ctx: RunContext, table: Table, i: int, j: int, value, settle: float = 1.0) -> None:
    """Show cell (i, j) being computed, then store ``value`` in it."""
    step = ctx.step
    table[i][j] = table[i][j].with_state("computing")
    await step.emit(table=_snapshot(table))
    table[i][j] = DPCell(value, "computed")
    await step.emit(settle, table=_snapshot(table))


def _finish(ctx: RunContext, table: Table, i: int, j: int) -> DPCell:
    table[i][j] = table[i][j].with_state("result")
    ctx.step.publish(table=_snapshot(table))
    return table[i][j]


async def fibonacci(ctx: RunContext, _work) -> Outcome:
    n = ctx.params["n"]
    seeds = (ctx.params["seed0"], ctx.params["seed1"])
    table: Table = [[DPCell(seeds[i] if i < 2 else None)] for i in range(n + 1)]
    await ctx.step.emit(table=_snapshot(table))

    for i in range(2, n + 1):
        await _compute(ctx, table, i, 0, table[i - 1][0].value + table[i - 2][0].value)

    cell = _finish(ctx, table, n, 0)
    return Outcome(summary=f"Fibonacci({n}) = {cell.value}", data={"value": cell.value})


async def knapsack(ctx: RunContext, _work) -> Outcome:
    weights = ctx.params["weights"]
    values = ctx.params["values"]
    capacity = ctx.params["capacity"]
    n = len(weights)

    table: Table = [[DPCell(0) for _ in range(capacity + 1)] for _ in range(n + 1)]
    await ctx.step.emit(table=_snapshot(table))

    for i in range(1, n + 1):
        weight, value = weights[i - 1], values[i - 1]
        for w in range(capacity + 1):
            best = table[i - 1][w].value
            if weight <= w:
                best = max(best, table[i - 1][w - weight].value + value)
            await _compute(ctx, table, i, w, best, settle=0.5)

    cell = _finish(ctx, table, n, capacity)
    return Outcome(summary=f"Maximum value: {cell.value}", data={"value": cell.value})


async def lcs(ctx: RunContext, _work) -> Outcome:
    a = ctx.params["a"]
    b = ctx.params["b"]
    m, n = len(a), len(b)

    table: Table = [[DPCell(0) for _ in range(n + 1)] for _ in range(m + 1)]
    await ctx.step.emit(table=_snapshot(table))

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                value = table[i - 1][j - 1].value + 1
            else:
                value = max(table[i - 1][j].value, table[i][j - 1].value)
            await _compute(ctx, table, i, j, value, settle=0.5)

    cell = _finish(ctx, table, m, n)
    return Outcome(summary=f"LCS Length: {cell.value}", data={"value": cell.value})


async def coin_change(ctx: RunContext, _work) -> Outcome:
    coins = ctx.params["coins"]
    amount = ctx.params["amount"]

    table: Table = [[DPCell(0 if i == 0 else UNREACHABLE)] for i in range(amount + 1)]
    await ctx.step.emit(table=_snapshot(table))

    for i in range(1, amount + 1):
        best = UNREACHABLE
        for coin in coins:
            if coin <= i and table[i - coin][0].reachable:
                candidate = table[i - coin][0].value + 1
                if best is UNREACHABLE or candidate < best:
                    best = candidate
        await _compute(ctx, table, i, 0, best)

    cell = _finish(ctx, table, amount, 0)
    if not cell.reachable:
        return Outcome(summary=f"Cannot make amount {amount}", data={"coins": None})
    return Outcome(summary=f"Minimum coins: {cell.value}", data={"coins": cell.value})


class DPDomain(Domain):
    name = "dp"
    algorithms = DPAlgorithm
    producers = {
        DPAlgorithm.FIBONACCI: fibonacci,
        DPAlgorithm.KNAPSACK: knapsack,
        DPAlgorithm.LCS: lcs,
        DPAlgorithm.COIN_CHANGE: coin_change,
    }
    defaults = {
        DPAlgorithm.FIBONACCI: {"n": 10, "seed0": 0, "seed1": 1},
        DPAlgorithm.KNAPSACK: {"weights": [10, 20, 30], "values": [60, 100, 120], "capacity": 50},
        DPAlgorithm.LCS: {"a": "ABCDGH", "b": "AEDFHR"},
        DPAlgorithm.COIN_CHANGE: {"coins": [1, 2, 5], "amount": 11},
    }

    def initial_views(self, params=None):
        return {"table": ()}
