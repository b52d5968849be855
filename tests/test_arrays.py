"""Sorting and searching producers over array cells."""
import pytest

from playback import generators
from producers.searching import SearchAlgorithm, SearchingDomain
from producers.sorting import SortAlgorithm, SortingDomain


class Tagged(int):
    """An int that remembers which input slot it came from."""

    def __new__(cls, value, tag):
        obj = super().__new__(cls, value)
        obj.tag = tag
        return obj


ARRAYS = [
    [64, 34, 25, 12, 22, 11, 90, 5],
    [5, 5, 3, 3, 1, 1],
    [1, 2, 3, 4, 5],
    [9, 8, 7, 6, 5, 4, 3, 2, 1],
    [42],
    [],
    generators.random_array(25, seed=7),
]


class TestSorting:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    @pytest.mark.parametrize("values", ARRAYS)
    async def test_result_is_sorted_permutation(self, make_controller, play, algorithm, values):
        domain = SortingDomain(values)
        controller = make_controller(domain)
        run = await play(controller, algorithm)

        cells = controller.head.view("cells")
        assert len(cells) == len(values)
        assert [c.value for c in cells] == sorted(values)
        assert all(c.state == "sorted" for c in cells)
        assert run.outcome.data["values"] == sorted(values)
        assert domain.values == sorted(values)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", list(SortAlgorithm))
    async def test_every_frame_keeps_the_cell_count(self, make_controller, play, algorithm):
        values = [7, 3, 9, 1, 4]
        controller = make_controller(SortingDomain(values))
        await play(controller, algorithm)
        assert all(len(f.view("cells")) == len(values) for f in controller.timeline)

    @pytest.mark.asyncio
    async def test_quicksort_partitions_on_last_element(self, make_controller, play):
        controller = make_controller(SortingDomain([3, 8, 1, 5]))
        await play(controller, "quick")
        # the first pivot (5) lands at index 2 and is the first cell marked sorted
        first_sorted = next(f for f in controller.timeline if "sorted" in f.states("cells"))
        assert first_sorted.states("cells").index("sorted") == 2
        assert first_sorted.view("cells")[2].value == 5

    @pytest.mark.asyncio
    async def test_partition_swaps_settle(self, make_controller, play):
        controller = make_controller(SortingDomain([1, 2, 5, 3]))
        await play(controller, "quick")
        assert max(f.states("cells").count("swapping") for f in controller.timeline) <= 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", ["merge", "insertion", "bubble"])
    async def test_stable_sorts_keep_equal_keys_in_order(self, make_controller, play, algorithm):
        values = [Tagged(2, "a"), Tagged(1, "b"), Tagged(2, "c"), Tagged(1, "d"), Tagged(0, "e")]
        controller = make_controller(SortingDomain(values))
        await play(controller, algorithm)
        assert [c.value.tag for c in controller.head.view("cells")] == ["e", "b", "d", "a", "c"]

    @pytest.mark.asyncio
    async def test_selection_takes_the_first_minimum(self, make_controller, play):
        values = [Tagged(2, "a"), Tagged(1, "b"), Tagged(1, "c")]
        controller = make_controller(SortingDomain(values))
        await play(controller, "selection")
        # first pass swaps index 0 with index 1, not with the later equal key at 2
        first_swap = next(f for f in controller.timeline if "swapping" in f.states("cells"))
        assert first_swap.states("cells") == ("swapping", "swapping", "default")
        assert [c.value.tag for c in controller.head.view("cells")] == ["b", "c", "a"]

    @pytest.mark.asyncio
    async def test_summary(self, make_controller, play):
        controller = make_controller(SortingDomain([2, 1]))
        await play(controller, "bubble")
        assert controller.result == "Sorted 2 values with Bubble Sort"


def _found(frame):
    return [c for c in frame.view("cells") if c.state == "found"]


class TestSearching:
    VALUES = generators.sorted_array(15)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", list(SearchAlgorithm))
    @pytest.mark.parametrize("target", [10, 70, 80, 150])
    async def test_present_value_is_found_once(self, make_controller, play, algorithm, target):
        controller = make_controller(SearchingDomain(self.VALUES))
        run = await play(controller, algorithm, {"target": target})

        found = _found(controller.head)
        assert len(found) == 1
        assert found[0].value == target
        assert run.outcome.data["index"] == self.VALUES.index(target)
        assert controller.result == f"Found {target} at index {self.VALUES.index(target)}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm", list(SearchAlgorithm))
    @pytest.mark.parametrize("target", [5, 75, 151])
    async def test_absent_value_marks_nothing_found(self, make_controller, play, algorithm, target):
        controller = make_controller(SearchingDomain(self.VALUES))
        run = await play(controller, algorithm, {"target": target})

        assert _found(controller.head) == []
        assert run.outcome.data["index"] is None
        assert controller.result == f"{target} not found"

    @pytest.mark.asyncio
    async def test_linear_scans_in_index_order(self, make_controller, play):
        controller = make_controller(SearchingDomain([4, 9, 2, 9]))
        run = await play(controller, "linear", {"target": 9})
        assert run.outcome.data["index"] == 1
        assert controller.head.states("cells") == ("not-found", "found", "default", "default")

    @pytest.mark.asyncio
    async def test_binary_starts_at_floor_midpoint(self, make_controller, play):
        controller = make_controller(SearchingDomain([10, 20, 30, 40]))
        await play(controller, "binary", {"target": 20})
        # lo=0, hi=3 -> mid=1 hits immediately, so only one midpoint frame exists
        midpoint_frames = [f for f in controller.timeline if "searching" in f.states("cells")]
        assert len(midpoint_frames) == 1

    @pytest.mark.asyncio
    async def test_jump_uses_sqrt_blocks(self, make_controller, play):
        values = generators.sorted_array(16)
        controller = make_controller(SearchingDomain(values))
        await play(controller, "jump", {"target": 130})
        # block size 4: blocks [0..3], [4..7], [8..11] are skipped wholesale
        head = controller.head.states("cells")
        assert head[:12] == ("not-found",) * 12
        assert head[12] == "found"

    @pytest.mark.asyncio
    async def test_missing_target_is_refused(self, make_controller):
        from playback.errors import InvalidParameterError

        controller = make_controller(SearchingDomain(self.VALUES))
        with pytest.raises(InvalidParameterError):
            controller.start("linear", {})
        with pytest.raises(InvalidParameterError):
            controller.start("linear", {"target": "seventy"})
