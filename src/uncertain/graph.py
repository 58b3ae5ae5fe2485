"""
Computation Graph

Expression tree behind every Uncertain value. Leaves wrap a sampler and
carry a unique id; interior nodes combine their children's values.

One draw evaluates the root against a fresh SampleContext. The context
memoises leaf values by (allocator namespace, id), so a leaf referenced
from several places in the same tree is sampled once and every reference
sees the same value.
That is what makes `x + x` equal `2 * x` per draw while `x + y` (two
different leaves) stays independent.
"""

import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

T = TypeVar("T")


# =============================================================================
# Leaf ids
# =============================================================================

class IdAllocator:
    """
    Monotonic leaf-id source. Lock-protected so leaves may be built from any thread.

    Ids only count within one allocator, so every allocator also takes a
    process-unique namespace. Leaves are memoised on (namespace, id), and two
    allocators never hand out the same key.
    """

    _namespaces = itertools.count()
    _namespace_lock = threading.Lock()

    def __init__(self, start: int = 0):
        with IdAllocator._namespace_lock:
            self.namespace = next(IdAllocator._namespaces)
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


# Process-wide allocator used when none is injected
default_allocator = IdAllocator()


# =============================================================================
# Sample Context
# =============================================================================

class SampleContext:
    """Per-draw memo of leaf key -> sampled value. Never reused across draws."""

    def __init__(self):
        self._cache: Dict[Hashable, Any] = {}

    def get_or_compute(self, leaf_id: Hashable, compute: Callable[[], T]) -> T:
        if leaf_id in self._cache:
            return self._cache[leaf_id]
        value = compute()
        self._cache[leaf_id] = value
        return value

    def __contains__(self, leaf_id: Hashable) -> bool:
        return leaf_id in self._cache

    def __len__(self) -> int:
        return len(self._cache)


# =============================================================================
# Nodes
# =============================================================================

class ComputationNode(Generic[T]):
    """Base class for graph nodes."""

    def evaluate(self, context: SampleContext) -> T:
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class LeafNode(ComputationNode[T]):
    """A sampling function identified by `id` within its allocator's `namespace`."""
    id: int
    sampler: Callable[[], T] = field(repr=False)
    namespace: int = 0

    @classmethod
    def create(cls, sampler: Callable[[], T], allocator: Optional[IdAllocator] = None) -> "LeafNode[T]":
        allocator = allocator or default_allocator
        return cls(id=allocator.next_id(), sampler=sampler, namespace=allocator.namespace)

    @property
    def key(self) -> Tuple[int, int]:
        return (self.namespace, self.id)

    def evaluate(self, context: SampleContext) -> T:
        return context.get_or_compute(self.key, self.sampler)


@dataclass(frozen=True, eq=False)
class BinaryOpNode(ComputationNode[Any]):
    """Applies `op` to the values of two child nodes from the same draw."""
    left: ComputationNode
    right: ComputationNode
    op: Callable[[Any, Any], Any] = field(repr=False)

    def evaluate(self, context: SampleContext) -> Any:
        left_value = self.left.evaluate(context)
        right_value = self.right.evaluate(context)
        return self.op(left_value, right_value)


@dataclass(frozen=True, eq=False)
class UnaryOpNode(ComputationNode[Any]):
    """Applies `op` to one child's value (negation, logical not)."""
    operand: ComputationNode
    op: Callable[[Any], Any] = field(repr=False)

    def evaluate(self, context: SampleContext) -> Any:
        return self.op(self.operand.evaluate(context))


@dataclass(frozen=True, eq=False)
class ComparisonNode(ComputationNode[bool]):
    """Ordering predicate between a child's value and a constant threshold."""
    left: ComputationNode
    threshold: Any
    predicate: Callable[[Any, Any], bool] = field(repr=False)

    def evaluate(self, context: SampleContext) -> bool:
        return bool(self.predicate(self.left.evaluate(context), self.threshold))


@dataclass(frozen=True, eq=False)
class EqualityNode(ComputationNode[bool]):
    """Equality predicate between a child's value and a constant."""
    left: ComputationNode
    threshold: Any
    predicate: Callable[[Any, Any], bool] = field(repr=False)

    def evaluate(self, context: SampleContext) -> bool:
        return bool(self.predicate(self.left.evaluate(context), self.threshold))


def evaluate(node: ComputationNode[T], context: Optional[SampleContext] = None) -> T:
    """Evaluate `node` once. A fresh context is created unless one is supplied."""
    return node.evaluate(context if context is not None else SampleContext())
