import asyncio

from dinger_api.scheduler import PeriodicRefresher
from dinger_api.services.refresh import RefreshInProgress


class RecordingService:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def refresh_all(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else {"homeruns": 0}
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_failed_and_skipped_ticks_do_not_stop_the_loop():
    service = RecordingService([RuntimeError("upstream down"), RefreshInProgress("busy"), {"homeruns": 2}])
    refresher = PeriodicRefresher(service, interval=60)

    async def tick_three_times():
        for _ in range(3):
            await refresher.run_once()

    asyncio.run(tick_three_times())
    assert service.calls == 3
    assert refresher.failures == 1
    assert refresher.runs == 1


def test_start_runs_immediately_and_stop_cancels():
    service = RecordingService([])
    refresher = PeriodicRefresher(service, interval=3600, initial_delay=0)

    async def start_then_stop():
        refresher.start()
        for _ in range(50):
            if service.calls:
                break
            await asyncio.sleep(0.01)
        await refresher.stop()

    asyncio.run(start_then_stop())
    assert service.calls == 1
    assert refresher.runs == 1


def test_refresh_against_real_service(service):
    refresher = PeriodicRefresher(service, interval=60)
    asyncio.run(refresher.run_once())
    assert refresher.runs == 1
    assert not service.running
