import asyncio

from incubator.session_sweeper import SessionSweeper


def test_sweep_removes_expired(store, clock):
    store.create("old")
    clock.tick(3 * 3600)
    store.create("new")

    sweeper = SessionSweeper(store, ttl_seconds=2 * 3600, interval_seconds=1800)

    assert sweeper.sweep() == 1
    assert store.get("new").id == "new"


def test_background_loop_sweeps_until_stopped(store, clock):
    store.create("old")
    clock.tick(3 * 3600)
    sweeper = SessionSweeper(store, ttl_seconds=2 * 3600, interval_seconds=0.01)

    async def scenario():
        sweeper.start()
        for _ in range(100):
            await asyncio.sleep(0.01)
            if len(store) == 0:
                break
        await sweeper.stop()

    asyncio.run(scenario())

    assert len(store) == 0
