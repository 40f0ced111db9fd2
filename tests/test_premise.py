"""
Tests for fol_eq/premise.py.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from fol_eq import ClosureStrategy, Literal, Premise, equals, fun


class TestInsert:
    def test_orientation_is_irrelevant(self):
        forward = Premise()
        forward.insert(Literal(1), Literal(2))
        backward = Premise()
        backward.insert(Literal(2), Literal(1))
        assert forward == backward
        assert forward.pairs() == backward.pairs()

    def test_duplicates_are_idempotent(self):
        premise = Premise()
        premise.insert(Literal(1), Literal(2))
        premise.insert(Literal(2), Literal(1))
        premise.insert(Literal(1), Literal(2))
        assert len(premise) == 1

    def test_contains(self):
        premise = Premise.from_equalities([(Literal("a"), fun("f", "b"))])
        assert (Literal("a"), fun("f", "b")) in premise
        assert (fun("f", "b"), Literal("a")) in premise
        assert (Literal("a"), Literal("b")) not in premise
        assert "a" not in premise

    def test_rejects_non_terms(self):
        with pytest.raises(TypeError):
            Premise().insert("a", Literal("b"))

    def test_empty(self):
        premise = Premise()
        assert len(premise) == 0
        assert premise.pairs() == []
        assert premise.equalities() == {}
        assert premise.terms() == frozenset()


class TestViews:
    def test_equalities_adjacency(self):
        x, y, z = Literal("x"), Literal("y"), Literal("z")
        premise = Premise.from_equalities([(x, y), (x, z), (z, y)])
        assert premise.equalities() == {
            x: frozenset({y, z}),
            y: frozenset({x, z}),
            z: frozenset({x, y}),
        }

    def test_pairs_are_deterministic(self):
        pairs = [(Literal(3), Literal(1)), (Literal(2), fun("f", 1)), (Literal(1), Literal(2))]
        a = Premise.from_equalities(pairs)
        b = Premise.from_equalities(reversed(pairs))
        assert a.pairs() == b.pairs()
        assert list(a) == a.pairs()
        assert a.pairs()[0] == (Literal(1), Literal(2))

    def test_terms_include_subterms(self):
        premise = Premise.from_equalities([(Literal("a"), fun("f", fun("g", "b")))])
        assert premise.terms() == frozenset(
            {Literal("a"), fun("f", fun("g", "b")), fun("g", "b"), Literal("b")}
        )

    def test_copy_is_independent(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        clone = premise.copy()
        clone.insert(Literal(2), Literal(3))
        assert len(premise) == 1
        assert len(clone) == 2
        assert premise != clone

    def test_repr(self):
        premise = Premise.from_equalities([(Literal(2), Literal(1))])
        assert repr(premise) == "Premise({1 = 2})"

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Premise())


class TestClosureCache:
    def test_closure_is_cached_per_strategy(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        assert premise.closure() is premise.closure(ClosureStrategy.WORKLIST)
        assert premise.closure("naive") is premise.closure(ClosureStrategy.NAIVE)
        assert premise.closure() is not premise.closure("naive")

    def test_cached_closure_is_frozen(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        assert premise.closure().frozen

    def test_insert_invalidates_cache(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        before = premise.closure()
        assert not equals(Literal(1), Literal(3), premise)
        premise.insert(Literal(2), Literal(3))
        assert premise.closure() is not before
        assert equals(Literal(1), Literal(3), premise)

    def test_duplicate_insert_keeps_cache(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        before = premise.closure()
        premise.insert(Literal(2), Literal(1))
        assert premise.closure() is before

    def test_queries_do_not_grow_cached_universe(self):
        premise = Premise.from_equalities([(Literal(1), Literal(2))])
        size = premise.closure().universe_size
        equals(fun("f", 1), fun("f", 2), premise)
        assert premise.closure().universe_size == size


class TestConcurrentQueries:
    def test_shared_premise_across_threads(self):
        premise = Premise()
        for i in range(20):
            premise.insert(Literal(i), Literal(i + 1))
        queries = [(fun("f", i, 0), fun("f", 20 - i, 20)) for i in range(21)]
        queries += [(Literal(i), Literal(100 + i)) for i in range(21)]
        expected = [True] * 21 + [False] * 21

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda q: equals(q[0], q[1], premise), queries * 5))

        assert results == expected * 5
