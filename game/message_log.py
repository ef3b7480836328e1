# game/message_log.py
from collections import deque
from typing import Iterator, List, Tuple

import structlog

from game.constants import COLOR_WHITE, Color

log = structlog.get_logger()

Message = Tuple[str, Color]


class MessageLog:
    """Bounded, player-facing message history.

    Stored oldest first.  Once ``capacity`` messages are held, appending a new
    one evicts the oldest.  Renderers typically draw most recent first, see
    :meth:`newest_first`.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._messages: deque[Message] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, text: str, color: Color = COLOR_WHITE) -> None:
        self._messages.append((text, color))
        log.debug("Message added", message=text, color=color)

    def newest_first(self) -> List[Message]:
        return list(reversed(self._messages))

    def clear(self) -> None:
        self._messages.clear()

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
