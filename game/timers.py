"""
One-shot deferred events, polled once per frame

Every event carries the generation of the level that scheduled it. A restart
bumps the generation, so leftovers from an old level are dropped on poll
instead of touching the new one.
"""

import heapq
import logging

logger = logging.getLogger(__name__)


class TimerQueue:
    """
    Min-heap of (fire_at, seq, generation, action, payload)
    """
    def __init__(self):
        self._heap = []
        self._seq = 0

    def schedule(self, fire_at, generation, action, payload=None):
        """
        Schedule an event

        Args:
            fire_at: Absolute timestamp (ms)
            generation: Level generation token
            action: Event name
            payload: Any data the handler needs
        """
        heapq.heappush(self._heap, (fire_at, self._seq, generation, action, payload))
        self._seq += 1

    def poll(self, now, generation):
        """
        Pop every event due at `now`

        Returns:
            List of (action, payload) for the current generation, in fire order
        """
        due = []
        while self._heap and self._heap[0][0] <= now:
            fire_at, _, gen, action, payload = heapq.heappop(self._heap)
            if gen != generation:
                logger.debug("dropping stale %s event from generation %s", action, gen)
                continue
            due.append((action, payload))
        return due

    def __len__(self):
        return len(self._heap)

    def __repr__(self):
        return f"TimerQueue(pending={len(self._heap)})"
