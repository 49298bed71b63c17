"""
Parallel read-only inference.

The tensor/network core holds no locks, so concurrency lives here: a blocking
queue with a terminal shutdown state, a fixed-size worker pool whose tasks
report through their own futures, and an agent that gives every worker thread
its own model replica built from an immutable snapshot.
"""

import copy
import threading
from collections import deque
from concurrent.futures import Future

from ..env.pong import PongEnv, run_episode
from ..utils.backend import xp
from .agent import PolicyAgent


class QueueClosedError(RuntimeError):
    """Raised by push after shutdown, and by pop once a shut down queue is drained."""


class ConcurrentQueue:
    def __init__(self):
        self._items = deque()
        self._cond = threading.Condition()
        self._closed = False

    @property
    def closed(self):
        with self._cond:
            return self._closed

    def __len__(self):
        with self._cond:
            return len(self._items)

    def push(self, item):
        with self._cond:
            if self._closed:
                raise QueueClosedError("Cannot push to a shut down queue")
            self._items.append(item)
            self._cond.notify()

    def pop(self, timeout=None):
        """
        Blocks until an item is available. Items queued before shutdown are
        still handed out; once the queue is shut down and empty this raises
        QueueClosedError. A ``timeout`` that expires raises TimeoutError.
        """
        with self._cond:
            ready = self._cond.wait_for(lambda: self._items or self._closed, timeout=timeout)
            if not ready:
                raise TimeoutError(f"No item available after {timeout}s")
            if self._items:
                return self._items.popleft()
            raise QueueClosedError("Queue is shut down and drained")

    def shutdown(self):
        with self._cond:
            self._closed = True
            self._cond.notify_all()


class WorkerPool:
    def __init__(self, num_workers=4, name="policynet-worker"):
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")
        self._queue = ConcurrentQueue()
        self._workers = [
            threading.Thread(target=self._worker_loop, name=f"{name}-{i}", daemon=True)
            for i in range(num_workers)
        ]
        for worker in self._workers:
            worker.start()

    @property
    def num_workers(self):
        return len(self._workers)

    def _worker_loop(self):
        while True:
            try:
                future, fn, args, kwargs = self._queue.pop()
            except QueueClosedError:
                return

            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

    def submit(self, fn, *args, **kwargs) -> Future:
        future = Future()
        self._queue.push((future, fn, args, kwargs))
        return future

    def map(self, fn, iterable):
        futures = [self.submit(fn, item) for item in iterable]
        return [future.result() for future in futures]

    def shutdown(self, wait=True):
        # queued tasks still run; new submits fail
        self._queue.shutdown()
        if wait:
            for worker in self._workers:
                worker.join()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
        return False


class ParallelAgent:
    """
    Concurrent ``act`` calls over a frozen copy of a model.

    The model is deep-copied into a snapshot that is never run; each thread
    (workers and direct callers alike) lazily clones its own replica from it,
    so the Dense/ReLU forward caches of concurrent calls never alias. Call
    ``refresh`` after further training to publish new parameters.
    """

    def __init__(self, model, pool_size=4):
        self._lock = threading.Lock()
        self._local = threading.local()
        self._generation = 0
        self.refresh(model)
        self._pool = WorkerPool(pool_size, name="policynet-agent")

    def refresh(self, model):
        snapshot = copy.deepcopy(model)
        with self._lock:
            self._snapshot = snapshot
            self._generation += 1

    def _local_agent(self) -> PolicyAgent:
        with self._lock:
            snapshot, generation = self._snapshot, self._generation
        local = self._local
        if getattr(local, "generation", None) != generation:
            local.agent = PolicyAgent(copy.deepcopy(snapshot))
            local.generation = generation
        return local.agent

    def _act(self, state):
        return self._local_agent().act(state)

    def _play(self, seed, max_steps):
        env = PongEnv(xp.random.default_rng(seed))
        return run_episode(self._local_agent(), env, max_steps)

    def act(self, state):
        return self._act(state)

    def act_async(self, state) -> Future:
        return self._pool.submit(self._act, state)

    def evaluate(self, episodes, max_steps=1000, seed=None):
        """Plays ``episodes`` independent episodes on the pool; returns their total rewards in order."""
        seeds = xp.random.SeedSequence(seed).spawn(episodes)
        futures = [self._pool.submit(self._play, s, max_steps) for s in seeds]
        return [future.result() for future in futures]

    def get_parameters(self):
        with self._lock:
            return self._snapshot.get_parameters()

    def shutdown(self, wait=True):
        self._pool.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
        return False
