import time
from collections import namedtuple
from typing import Callable, Iterable, Optional

# One unit of cooperative work handed to a driver.
# delay: seconds the driver should wait before resuming the producer.
Tick = namedtuple("Tick", ["phase", "status", "delay"])

class BatchScheduler:
    """
    Batch-and-yield helper for cooperative loops.

    The owning loop calls cancelled() before each work item and tick()
    after it; tick() returns True once every 'batch_size' items, which is
    where the loop should yield to its driver.
    """
    def __init__(self, batch_size: int = 20, should_continue: Optional[Callable[[], bool]] = None):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size
        self.should_continue = should_continue
        self.processed = 0

    def cancelled(self) -> bool:
        return self.should_continue is not None and not self.should_continue()

    def tick(self) -> bool:
        self.processed += 1
        return self.processed % self.batch_size == 0

def drive(ticks: Iterable[Tick], realtime: bool = True, sleep: Callable[[float], None] = time.sleep) -> int:
    """
    Runs a tick stream to exhaustion on the calling thread.
    Returns the number of ticks consumed.
    """
    count = 0
    for tick in ticks:
        count += 1
        if realtime and tick.delay > 0:
            sleep(tick.delay)
    return count
