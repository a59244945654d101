"""
调度器

回合倒计时 (每秒重复) 与 AI 思考延迟 (一次性) 都通过可取消的任务句柄管理。

- ThreadingScheduler: 后台线程定时器，用于实际对局
- ManualScheduler: 虚拟时钟，由调用方推进，用于测试
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import heapq
import itertools
import threading


class TaskHandle:
    """可取消的任务句柄"""

    def __init__(self, interval: Optional[float] = None):
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self):
        self._cancelled = True


class Scheduler(ABC):
    """调度器基类"""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        """delay 秒后执行一次"""

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TaskHandle:
        """每 interval 秒执行一次，直到取消"""

    def shutdown(self):
        """释放资源"""


class ThreadingScheduler(Scheduler):
    """
    基于 threading.Timer 的调度器

    回调在后台线程执行，调用方需自行加锁
    """

    def __init__(self):
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def _start_timer(self, delay: float, fn: Callable[[], None]):
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        handle = TaskHandle()

        def fire():
            if not handle.cancelled:
                handle.cancel()
                callback()

        self._start_timer(delay, fire)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TaskHandle:
        handle = TaskHandle(interval)

        def fire():
            if handle.cancelled:
                return
            # 先续期再回调，回调内部可以取消自身
            self._start_timer(interval, fire)
            callback()

        self._start_timer(interval, fire)
        return handle

    def shutdown(self):
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()


class ManualScheduler(Scheduler):
    """
    虚拟时钟调度器

    时间只在调用 advance() 时前进，回调在调用线程中按到期顺序执行
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list = []
        self._counter = itertools.count()

    def _push(self, when: float, handle: TaskHandle, callback: Callable[[], None]):
        heapq.heappush(self._queue, (when, next(self._counter), handle, callback))

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        handle = TaskHandle()
        self._push(self.now + delay, handle, callback)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TaskHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TaskHandle(interval)
        self._push(self.now + interval, handle, callback)
        return handle

    @property
    def pending(self) -> int:
        """未取消的待执行任务数"""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """
        推进虚拟时间并执行到期任务

        Args:
            seconds: 推进的秒数

        Returns:
            执行的回调数
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            if handle.repeating:
                self._push(when + handle.interval, handle, callback)
            else:
                handle.cancel()
            callback()
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_seconds: float = 3600.0) -> int:
        """推进到没有待执行任务为止 (重复任务会一直存在，受 max_seconds 限制)"""
        fired = 0
        deadline = self.now + max_seconds
        while self.pending and self.now < deadline:
            next_when = min(when for when, _, handle, _ in self._queue if not handle.cancelled)
            fired += self.advance(max(0.0, next_when - self.now))
        return fired
