"""
Computation Graph Tests

Leaf memoisation, node evaluation and id allocation.
"""

import threading

from src.uncertain.graph import (
    BinaryOpNode,
    ComparisonNode,
    EqualityNode,
    IdAllocator,
    LeafNode,
    SampleContext,
    UnaryOpNode,
    evaluate,
)


def counting_sampler(values):
    """Sampler returning successive values and recording how often it ran."""
    calls = {"n": 0}
    iterator = iter(values)

    def _sample():
        calls["n"] += 1
        return next(iterator)

    return _sample, calls


class TestSampleContext:

    def test_computes_once_per_id(self):
        context = SampleContext()
        sampler, calls = counting_sampler([1, 2, 3])

        assert context.get_or_compute(7, sampler) == 1
        assert context.get_or_compute(7, sampler) == 1
        assert calls["n"] == 1
        assert 7 in context
        assert len(context) == 1

    def test_distinct_ids_are_independent(self):
        context = SampleContext()
        assert context.get_or_compute(1, lambda: "a") == "a"
        assert context.get_or_compute(2, lambda: "b") == "b"
        assert len(context) == 2


class TestNodes:

    def test_shared_leaf_sampled_once_per_draw(self, allocator):
        """x + x evaluates the leaf once and reuses the value."""
        sampler, calls = counting_sampler([3, 10])
        leaf = LeafNode.create(sampler, allocator)
        node = BinaryOpNode(left=leaf, right=leaf, op=lambda a, b: a + b)

        assert evaluate(node) == 6
        assert calls["n"] == 1

    def test_fresh_context_per_draw(self, allocator):
        sampler, _ = counting_sampler([3, 10])
        leaf = LeafNode.create(sampler, allocator)
        node = BinaryOpNode(left=leaf, right=leaf, op=lambda a, b: a + b)

        assert evaluate(node) == 6
        assert evaluate(node) == 20

    def test_different_leaves_sampled_separately(self, allocator):
        left = LeafNode.create(lambda: 2, allocator)
        right = LeafNode.create(lambda: 5, allocator)
        node = BinaryOpNode(left=left, right=right, op=lambda a, b: a * b)
        assert evaluate(node) == 10

    def test_deep_fan_out_is_linear(self, allocator):
        """A leaf referenced many times through nested nodes is still drawn once."""
        sampler, calls = counting_sampler(range(100))
        leaf = LeafNode.create(sampler, allocator)
        node = leaf
        for _ in range(50):
            node = BinaryOpNode(left=node, right=leaf, op=lambda a, b: a + b)

        context = SampleContext()
        assert node.evaluate(context) == 0
        assert calls["n"] == 1

    def test_unary_node(self, allocator):
        leaf = LeafNode.create(lambda: 4, allocator)
        assert evaluate(UnaryOpNode(operand=leaf, op=lambda v: -v)) == -4

    def test_comparison_and_equality_nodes(self, allocator):
        leaf = LeafNode.create(lambda: 4, allocator)
        assert evaluate(ComparisonNode(left=leaf, threshold=3, predicate=lambda a, b: a > b)) is True
        assert evaluate(EqualityNode(left=leaf, threshold=5, predicate=lambda a, b: a == b)) is False

    def test_supplied_context_is_shared(self, allocator):
        sampler, calls = counting_sampler([1, 2])
        leaf = LeafNode.create(sampler, allocator)
        context = SampleContext()

        first = evaluate(leaf, context)
        second = evaluate(leaf, context)
        assert first == second == 1
        assert calls["n"] == 1


class TestIdAllocator:

    def test_monotonic(self):
        allocator = IdAllocator(start=10)
        assert [allocator.next_id() for _ in range(3)] == [10, 11, 12]

    def test_each_allocator_has_its_own_namespace(self):
        first = IdAllocator()
        second = IdAllocator()
        assert first.namespace != second.namespace

    def test_equal_ids_from_different_allocators_are_sampled_separately(self):
        left = LeafNode.create(lambda: 2, IdAllocator())
        right = LeafNode.create(lambda: 5, IdAllocator())
        assert left.id == right.id
        assert left.key != right.key

        context = SampleContext()
        node = BinaryOpNode(left=left, right=right, op=lambda a, b: a * b)
        assert node.evaluate(context) == 10
        assert len(context) == 2

    def test_injected_allocator_used_for_leaves(self):
        allocator = IdAllocator(start=500)
        leaf = LeafNode.create(lambda: 0, allocator)
        assert leaf.id == 500

    def test_unique_across_threads(self):
        allocator = IdAllocator()
        seen = []
        lock = threading.Lock()

        def worker():
            ids = [allocator.next_id() for _ in range(1000)]
            with lock:
                seen.extend(ids)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 8000
        assert len(set(seen)) == 8000
