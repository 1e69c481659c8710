"""LIFO stack and FIFO queue models."""

from __future__ import annotations

import string
from typing import Iterable, List, Optional, Union

import numpy as np

from ..errors import EmptyStructureError, coerce_element
from .sequence import SequenceStructure

__all__ = ["Element", "Queue", "Stack", "random_elements"]

Element = Union[int, str]


class Stack(SequenceStructure[Element]):
    """Last-in, first-out sequence; the top is the last element."""

    __slots__ = ()

    def __init__(self, values: Optional[Iterable[object]] = None) -> None:
        super().__init__(coerce_element(value) for value in (values or ()))

    def peek(self) -> Element:
        if not self._items:
            raise EmptyStructureError("Cannot peek into an empty stack")
        return self._items[-1]

    def push(self, value: object) -> None:
        from ..engines import linear as engine
        from ..steps import drain

        drain(self, engine.push(self, value))

    def pop(self) -> Element:
        from ..engines import linear as engine
        from ..steps import drain

        return drain(self, engine.pop(self)).value


class Queue(SequenceStructure[Element]):
    """First-in, first-out sequence; front is the first element."""

    __slots__ = ()

    def __init__(self, values: Optional[Iterable[object]] = None) -> None:
        super().__init__(coerce_element(value) for value in (values or ()))

    def front(self) -> Element:
        if not self._items:
            raise EmptyStructureError("Cannot read the front of an empty queue")
        return self._items[0]

    def rear(self) -> Element:
        if not self._items:
            raise EmptyStructureError("Cannot read the rear of an empty queue")
        return self._items[-1]

    def enqueue(self, value: object) -> None:
        from ..engines import linear as engine
        from ..steps import drain

        drain(self, engine.enqueue(self, value))

    def dequeue(self) -> Element:
        from ..engines import linear as engine
        from ..steps import drain

        return drain(self, engine.dequeue(self)).value


def random_elements(
    rng: Optional[np.random.Generator] = None,
    *,
    min_count: int = 4,
    max_count: int = 8,
) -> List[Element]:
    """Return 4–8 random elements, each a capital letter or a number in 1..100."""

    generator = rng if rng is not None else np.random.default_rng()
    count = int(generator.integers(min_count, max_count + 1))
    elements: List[Element] = []
    for _ in range(count):
        if generator.random() < 0.5:
            elements.append(string.ascii_uppercase[int(generator.integers(0, 26))])
        else:
            elements.append(int(generator.integers(1, 101)))
    return elements
