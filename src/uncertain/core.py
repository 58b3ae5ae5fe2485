"""
Uncertain Value

`Uncertain[T]` represents a random variable as a lazily evaluated sampling
procedure plus the computation graph it was derived from.

Arithmetic, comparison and boolean operators build graph nodes over the
operands' existing nodes, so shared sub-expressions stay correlated within
a draw:

    x = uniform(0.0, 1.0)
    (x + x).sample()        # always 2 * (one draw of x)
    (x - x).sample()        # always 0.0

`map`, `flat_map` and `filter` do NOT compose nodes. They wrap the whole
upstream sampler in a brand-new leaf, so `x.map(f) + x` draws `x` twice,
independently. Use operators when correlation with other references matters.

Based on Bornholt, Mytkowicz & McKinley, "Uncertain<T>: A First-Order Type
for Uncertain Data", ASPLOS 2014.
"""

import logging
import numbers
import operator
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from src.config import config
from src.uncertain import estimators, sprt
from src.uncertain.errors import RejectionSamplingExhausted
from src.uncertain.graph import (
    BinaryOpNode,
    ComparisonNode,
    ComputationNode,
    EqualityNode,
    IdAllocator,
    LeafNode,
    SampleContext,
    UnaryOpNode,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


def _require_uncertain(other: Any, operation: str) -> None:
    if not isinstance(other, Uncertain):
        raise TypeError(f"{operation} expects an Uncertain operand, got {type(other).__name__}")


class Uncertain(Generic[T]):
    """A random variable of type T."""

    __slots__ = ("_node", "_allocator")

    def __init__(self, sampler: Callable[[], T], allocator: Optional[IdAllocator] = None):
        self._allocator = allocator
        self._node: ComputationNode[T] = LeafNode.create(sampler, allocator)

    @classmethod
    def _from_node(cls, node: ComputationNode, allocator: Optional[IdAllocator] = None) -> "Uncertain":
        instance = cls.__new__(cls)
        instance._allocator = allocator
        instance._node = node
        return instance

    def _derive(self, node: ComputationNode) -> "Uncertain":
        """Wrap a node built over this value, keeping its allocator for later leaves."""
        return Uncertain._from_node(node, self._allocator)

    @property
    def node(self) -> ComputationNode[T]:
        return self._node

    def __repr__(self) -> str:
        return f"Uncertain(node={type(self._node).__name__})"

    # =========================================================================
    # Sampling
    # =========================================================================

    def sample(self) -> T:
        """Draw one value. Every call evaluates the graph under a fresh context."""
        return self._node.evaluate(SampleContext())

    def __iter__(self) -> Iterator[T]:
        """Infinite stream of independent draws. Each iter() call starts a new stream."""
        while True:
            yield self.sample()

    def take(self, n: int) -> List[T]:
        """Draw `n` independent values."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return [self.sample() for _ in range(n)]

    # =========================================================================
    # Combinators
    # =========================================================================

    def map(self, transform: Callable[[T], U]) -> "Uncertain[U]":
        """Apply `transform` to each draw. The result is a new, opaque leaf."""
        return Uncertain(lambda: transform(self.sample()), self._allocator)

    def flat_map(self, transform: Callable[[T], "Uncertain[U]"]) -> "Uncertain[U]":
        """Draw, build a dependent Uncertain from the draw, then draw from that."""
        return Uncertain(lambda: transform(self.sample()).sample(), self._allocator)

    def filter(self, predicate: Callable[[T], bool], max_attempts: Optional[int] = None) -> "Uncertain[T]":
        """
        Rejection sampling: redraw until `predicate` holds.

        With no budget (the default unless UNCERTAIN_FILTER_MAX_ATTEMPTS is set)
        a predicate with zero acceptance probability never returns. With a
        budget, running out raises RejectionSamplingExhausted.
        """
        budget = max_attempts if max_attempts is not None else config.sampling.filter_max_attempts
        if budget is not None and budget < 1:
            raise ValueError(f"max_attempts must be at least 1, got {budget}")

        def _rejection_sampler() -> T:
            attempts = 0
            while budget is None or attempts < budget:
                attempts += 1
                value = self.sample()
                if predicate(value):
                    return value
            logger.debug(f"filter budget exhausted after {attempts} attempts")
            raise RejectionSamplingExhausted(attempts)

        return Uncertain(_rejection_sampler, self._allocator)

    # =========================================================================
    # Graph construction helpers
    # =========================================================================

    def _lift(self, other: Any) -> Optional[ComputationNode]:
        """Node for an operand: its own node, a point-mass leaf for numbers, else None."""
        if isinstance(other, Uncertain):
            return other._node
        if isinstance(other, numbers.Number):
            return LeafNode.create(lambda: other, self._allocator)
        return None

    def _binary(self, other: Any, op: Callable[[Any, Any], Any], reflected: bool = False):
        other_node = self._lift(other)
        if other_node is None:
            return NotImplemented
        if reflected:
            return self._derive(BinaryOpNode(left=other_node, right=self._node, op=op))
        return self._derive(BinaryOpNode(left=self._node, right=other_node, op=op))

    def _compare(self, other: Any, op: Callable[[Any, Any], bool]) -> "Uncertain[bool]":
        if isinstance(other, Uncertain):
            return self._derive(BinaryOpNode(left=self._node, right=other._node, op=op))
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self._derive(ComparisonNode(left=self._node, threshold=other, predicate=op))

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, reflected=True)

    def __neg__(self) -> "Uncertain[T]":
        return self._derive(UnaryOpNode(operand=self._node, op=operator.neg))

    # =========================================================================
    # Comparison and equality
    # =========================================================================

    def __gt__(self, other) -> "Uncertain[bool]":
        return self._compare(other, operator.gt)

    def __lt__(self, other) -> "Uncertain[bool]":
        return self._compare(other, operator.lt)

    def __ge__(self, other) -> "Uncertain[bool]":
        return self._compare(other, operator.ge)

    def __le__(self, other) -> "Uncertain[bool]":
        return self._compare(other, operator.le)

    def eq(self, value: Any) -> "Uncertain[bool]":
        """Evidence that a draw equals `value` (a constant or another Uncertain)."""
        if isinstance(value, Uncertain):
            return self._derive(BinaryOpNode(left=self._node, right=value._node, op=operator.eq))
        return self._derive(EqualityNode(left=self._node, threshold=value, predicate=operator.eq))

    def neq(self, value: Any) -> "Uncertain[bool]":
        """Evidence that a draw differs from `value`."""
        if isinstance(value, Uncertain):
            return self._derive(BinaryOpNode(left=self._node, right=value._node, op=operator.ne))
        return self._derive(EqualityNode(left=self._node, threshold=value, predicate=operator.ne))

    # =========================================================================
    # Boolean combinators
    # =========================================================================

    def logical_and(self, other: "Uncertain[bool]") -> "Uncertain[bool]":
        _require_uncertain(other, "logical_and")
        return self._derive(
            BinaryOpNode(left=self._node, right=other._node, op=lambda a, b: bool(a) and bool(b))
        )

    def logical_or(self, other: "Uncertain[bool]") -> "Uncertain[bool]":
        _require_uncertain(other, "logical_or")
        return self._derive(
            BinaryOpNode(left=self._node, right=other._node, op=lambda a, b: bool(a) or bool(b))
        )

    def logical_not(self) -> "Uncertain[bool]":
        return self._derive(UnaryOpNode(operand=self._node, op=operator.not_))

    def __and__(self, other):
        if not isinstance(other, Uncertain):
            return NotImplemented
        return self.logical_and(other)

    def __or__(self, other):
        if not isinstance(other, Uncertain):
            return NotImplemented
        return self.logical_or(other)

    def __invert__(self) -> "Uncertain[bool]":
        return self.logical_not()

    def __bool__(self):
        raise TypeError(
            "The truth value of an Uncertain is ambiguous; "
            "use probability(exceeds=...) or implicit_conditional()"
        )

    # =========================================================================
    # Hypothesis testing
    # =========================================================================

    def probability(
        self,
        exceeds: float,
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
        max_samples: Optional[int] = None,
    ) -> bool:
        """True when the evidence says P(self is True) >= exceeds (SPRT)."""
        return sprt.evaluate_probability(
            self.sample, exceeds=exceeds, alpha=alpha, beta=beta, max_samples=max_samples
        )

    def implicit_conditional(self) -> bool:
        """Same as probability(exceeds=0.5) with default error rates."""
        return self.probability(exceeds=0.5)

    # =========================================================================
    # Statistics
    # =========================================================================

    def expected_value(self, sample_count: Optional[int] = None) -> float:
        return estimators.expected_value(self, sample_count)

    def variance(self, sample_count: Optional[int] = None) -> float:
        return estimators.variance(self, sample_count)

    def standard_deviation(self, sample_count: Optional[int] = None) -> float:
        return estimators.standard_deviation(self, sample_count)

    def skewness(self, sample_count: Optional[int] = None) -> float:
        return estimators.skewness(self, sample_count)

    def kurtosis(self, sample_count: Optional[int] = None) -> float:
        return estimators.kurtosis(self, sample_count)

    def mode(self, sample_count: Optional[int] = None) -> Optional[T]:
        return estimators.mode(self, sample_count)

    def histogram(self, sample_count: Optional[int] = None) -> Dict[T, int]:
        return estimators.histogram(self, sample_count)

    def entropy(self, sample_count: Optional[int] = None) -> float:
        return estimators.entropy(self, sample_count)

    def quantile(self, q: float, sample_count: Optional[int] = None) -> T:
        return estimators.quantile(self, q, sample_count)

    def median(self, sample_count: Optional[int] = None) -> T:
        return estimators.median(self, sample_count)

    def cdf(self, value: T, sample_count: Optional[int] = None) -> float:
        return estimators.cdf(self, value, sample_count)

    def confidence_interval(
        self, confidence: Optional[float] = None, sample_count: Optional[int] = None
    ) -> "estimators.ConfidenceInterval":
        return estimators.confidence_interval(self, confidence, sample_count)

    def log_likelihood(self, value: float, sample_count: Optional[int] = None, bandwidth: float = 1.0) -> float:
        return estimators.log_likelihood(self, value, sample_count, bandwidth)

    def summarize(
        self, confidence: Optional[float] = None, sample_count: Optional[int] = None
    ) -> "estimators.DistributionSummary":
        return estimators.summarize(self, confidence, sample_count)
