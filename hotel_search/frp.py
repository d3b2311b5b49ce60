import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Any, Tuple, Optional, Awaitable, Set
from uuid import uuid4

from .domain import Event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    id: str
    event_type: str
    callback: Callable[[Event], Any]
    filter_predicate: Optional[Callable[[Event], bool]] = None


class EventBus:
    """Шина событий поиска: подписки, история и агрегированное состояние"""

    def __init__(self, history_limit: int = 500):
        self._subscribers: Dict[str, List[Subscription]] = {}
        self._event_history: List[Event] = []
        self._history_limit = history_limit
        self._counters: Dict[str, int] = {}

    def subscribe(
        self,
        event_type: str,
        callback: Callable[[Event], Any],
        filter_predicate: Callable[[Event], bool] = None
    ) -> str:
        """Подписаться на тип событий с опциональным фильтром"""
        sub_id = str(uuid4())
        self._subscribers.setdefault(event_type, []).append(
            Subscription(sub_id, event_type, callback, filter_predicate)
        )
        return sub_id

    def unsubscribe(self, sub_id: str) -> bool:
        for subscribers in self._subscribers.values():
            for i, sub in enumerate(subscribers):
                if sub.id == sub_id:
                    subscribers.pop(i)
                    return True
        return False

    async def publish(self, event: Event) -> None:
        """Опубликовать событие. Ошибка подписчика не прерывает рассылку."""
        self._event_history.append(event)
        del self._event_history[:-self._history_limit]
        self._counters[event.name] = self._counters.get(event.name, 0) + 1

        for subscriber in tuple(self._subscribers.get(event.name, ())):
            if subscriber.filter_predicate and not subscriber.filter_predicate(event):
                continue
            try:
                if inspect.iscoroutinefunction(subscriber.callback):
                    await subscriber.callback(event)
                else:
                    subscriber.callback(event)
            except Exception:
                logger.exception("Error in event subscriber %s", subscriber.id)

    async def emit(self, name: str, payload: Dict[str, Any] = None) -> Event:
        event = Event(
            id=str(uuid4()),
            ts=datetime.now().isoformat(),
            name=name,
            payload=payload or {}
        )
        await self.publish(event)
        return event

    def get_state(self) -> Dict[str, int]:
        """Счетчики опубликованных событий по типам"""
        return dict(self._counters)

    def get_event_history(self, limit: int = 100, event_type: str = None) -> Tuple[Event, ...]:
        events = self._event_history
        if event_type:
            events = [e for e in events if e.name == event_type]
        return tuple(events[-limit:]) if limit > 0 else ()

    def get_subscriber_count(self, event_type: str = None) -> int:
        if event_type:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subs) for subs in self._subscribers.values())


class Debouncer:
    """
    Таймер с одним слотом: каждый schedule() отменяет ожидающий запуск,
    выполняется только последний вызов (trailing edge). Отменяется только
    ожидание; уже запущенное действие доводится до конца.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self, action: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._fire(action))
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _fire(self, action: Callable[[], Awaitable[Any]]) -> None:
        await asyncio.sleep(self.delay)
        if self._timer is asyncio.current_task():
            self._timer = None
        try:
            await action()
        except Exception:
            logger.exception("Debounced action failed")

    def cancel(self) -> bool:
        if self.pending:
            self._timer.cancel()
            self._timer = None
            return True
        return False

    async def flush(self) -> None:
        """Дождаться выполнения отложенных и запущенных действий"""
        while self._tasks:
            await asyncio.wait(set(self._tasks))


# Глобальная шина событий сервера
event_bus = EventBus()
