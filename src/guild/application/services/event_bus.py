from collections import defaultdict
import logging
from typing import Callable, DefaultDict, List, Type

Handler = Callable[[object], None]


class EventBus:
    """Synchronous in-process pub/sub for guild domain events.

    Handlers run in (priority, subscription order). A failing handler is
    logged and recorded, and the remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[object], List[tuple[int, int, Handler]]] = defaultdict(list)
        self._sequence = 0
        self._errors: List[Exception] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: Type[object], handler: Handler, *, priority: int = 100) -> None:
        rows = self._handlers[event_type]
        rows.append((int(priority), self._sequence, handler))
        self._sequence += 1
        rows.sort(key=lambda row: (row[0], row[1]))

    def unsubscribe(self, event_type: Type[object], handler: Handler) -> bool:
        rows = self._handlers.get(event_type, [])
        kept = [row for row in rows if row[2] != handler]
        if len(kept) == len(rows):
            return False
        self._handlers[event_type] = kept
        return True

    def publish(self, event: object) -> None:
        self._errors = []
        event_type = type(event)
        for priority, _, handler in list(self._handlers.get(event_type, [])):
            try:
                handler(event)
            except Exception as exc:
                self._errors.append(exc)
                self._logger.exception(
                    "Guild event handler failed and was isolated",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                        "priority": priority,
                    },
                )

    def last_publish_errors(self) -> List[Exception]:
        return list(self._errors)


def publish_if_wired(event_bus: "EventBus | None", event: object) -> None:
    if event_bus is not None:
        event_bus.publish(event)
