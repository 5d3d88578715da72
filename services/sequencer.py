import threading
from collections import OrderedDict


class RequestSequencer:
    """Remembers the newest request number seen per client channel.

    Clients number their search-as-you-type requests. A response whose
    number is no longer the newest is flagged stale so the browser can drop
    it instead of overwriting newer results.
    """

    def __init__(self, max_channels=10000):
        self.max_channels = max_channels
        self._latest = OrderedDict()
        self._lock = threading.Lock()

    def observe(self, channel, seq):
        with self._lock:
            latest = self._latest.get(channel)
            if latest is None or seq > latest:
                self._latest[channel] = seq
            self._latest.move_to_end(channel)
            while len(self._latest) > self.max_channels:
                self._latest.popitem(last=False)

    def is_current(self, channel, seq):
        with self._lock:
            latest = self._latest.get(channel)
        return latest is None or seq >= latest

    def latest(self, channel):
        with self._lock:
            return self._latest.get(channel)
