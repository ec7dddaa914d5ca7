import asyncio

import pytest

from recollect.debounce import Debouncer


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_single_call_runs(self):
        debounce = Debouncer(0.01)

        async def work():
            return "done"

        assert await debounce(work) == "done"

    @pytest.mark.asyncio
    async def test_burst_runs_only_last(self):
        debounce = Debouncer(0.05)
        ran: list[int] = []

        def make(i: int):
            async def work():
                ran.append(i)
                return i

            return work

        results = await asyncio.gather(*(debounce(make(i)) for i in range(3)))

        assert results == [None, None, 2]
        assert ran == [2]

    @pytest.mark.asyncio
    async def test_spaced_calls_all_run(self):
        debounce = Debouncer(0.01)

        async def work():
            return 1

        assert await debounce(work) == 1
        assert await debounce(work) == 1

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        debounce = Debouncer(0.01)

        async def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await debounce(fail)
