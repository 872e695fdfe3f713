# kvcache/services/values.py

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Type, TypeVar, Union

from .errors import WrongType


@dataclass
class Scalar:
    """A single string value."""
    data: str = ""


@dataclass
class ListValue:
    """Ordered sequence of strings; duplicates and empty strings are allowed."""
    items: Deque[str] = field(default_factory=deque)


@dataclass
class DictValue:
    """Field -> value mapping. Insertion order carries no meaning."""
    fields: Dict[str, str] = field(default_factory=dict)


# Every stored entry is exactly one of these.
Value = Union[Scalar, ListValue, DictValue]
VARIANTS = (Scalar, ListValue, DictValue)

V = TypeVar("V", Scalar, ListValue, DictValue)


def expect(value: Value, variant: Type[V]) -> V:
    """
    Narrow a stored value to the variant an operation needs.
    Raises WrongType when the entry holds a different variant.
    """
    if not isinstance(value, VARIANTS):
        raise TypeError(f"not a cache value: {type(value).__name__}")
    if not isinstance(value, variant):
        raise WrongType()
    return value