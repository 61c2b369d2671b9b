"""
core/engine/keyed_lock.py

按键加锁 - 对同一键（如房间 ID）的多步操作串行化
仅在单进程内有效
"""
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List
import logging
import threading

logger = logging.getLogger(__name__)


class KeyedLock:
    """
    每个键一把可重入锁

    锁表只保留正在被持有或等待的键，最后一个使用者退出后条目即被移除

    Example:
        >>> room_locks = KeyedLock("room")
        >>> with room_locks.hold(room_id):
        ...     check_then_insert()
    """

    def __init__(self, name: str = "keyed"):
        self._name = name
        # 键 -> [锁, 持有或等待中的使用者数]
        self._locks: Dict[Hashable, List] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, key: Hashable) -> threading.RLock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.RLock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: Hashable) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """持有某个键的锁"""
        lock = self._checkout(key)
        try:
            lock.acquire()
            logger.debug(f"{self._name} lock acquired: {key}")
            try:
                yield
            finally:
                lock.release()
                logger.debug(f"{self._name} lock released: {key}")
        finally:
            self._checkin(key)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)


# 房间级锁：预订的可用性检查+写入、评价写入+评分重算
room_locks = KeyedLock("room")


__all__ = ["KeyedLock", "room_locks"]
