import asyncio

import pytest

from quote_ratio.pipeline.work_queue import QueueClosed, WorkQueue


@pytest.mark.asyncio
async def test_items_come_out_in_enqueue_order_across_batches():
    queue = WorkQueue()
    queue.put_batch(["p1-a", "p1-b", "p1-c"])
    queue.put_batch(["p2-a", "p2-b"])
    queue.put("p3-a")
    queue.close()

    seen = [item async for item in queue]

    assert seen == ["p1-a", "p1-b", "p1-c", "p2-a", "p2-b", "p3-a"]


@pytest.mark.asyncio
async def test_receiver_blocks_until_producer_sends_or_closes():
    queue = WorkQueue()
    received = []

    async def consume():
        async for item in queue:
            received.append(item)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    assert not task.done()

    queue.put(1)
    await asyncio.sleep(0)
    assert received == [1]
    assert not task.done()

    queue.close()
    await asyncio.wait_for(task, timeout=1)
    assert received == [1]


@pytest.mark.asyncio
async def test_closed_and_drained_queue_keeps_returning_none():
    queue = WorkQueue()
    queue.put("only")
    queue.close()
    queue.close()

    assert await queue.get() == "only"
    assert await queue.get() is None
    assert await queue.get() is None


def test_put_after_close_raises():
    queue = WorkQueue()
    queue.close()
    assert queue.closed
    with pytest.raises(QueueClosed):
        queue.put("late")
