from __future__ import annotations

import itertools
import threading
from collections import OrderedDict
from dataclasses import dataclass

DEFAULT_MAX_KEYS = 10_000


@dataclass(slots=True, frozen=True)
class GenerationToken:
    key: str
    generation: int


class RequestGeneration:
    """Tracks the newest planning request per key so stale results can be dropped.

    Every new request for a key gets a fresh generation number. A result
    computed for an older token is stale once a newer request has started.
    Finished requests release their key, and at most ``max_keys`` in-flight
    keys are tracked; the oldest key is evicted first, which makes its
    request stale.
    """

    def __init__(self, max_keys: int = DEFAULT_MAX_KEYS) -> None:
        self.max_keys = max_keys
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._generations: OrderedDict[str, int] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._generations)

    def start(self, key: str) -> GenerationToken:
        with self._lock:
            generation = next(self._counter)
            self._generations[key] = generation
            self._generations.move_to_end(key)
            while len(self._generations) > self.max_keys:
                self._generations.popitem(last=False)
        return GenerationToken(key=key, generation=generation)

    def is_current(self, token: GenerationToken) -> bool:
        with self._lock:
            return self._generations.get(token.key) == token.generation

    def release(self, token: GenerationToken) -> None:
        with self._lock:
            if self._generations.get(token.key) == token.generation:
                del self._generations[token.key]
