# tests/conftest.py
import pytest

from fol_eq import ClosureStrategy, EngineConfig, Literal, Premise, fun


@pytest.fixture
def literals():
    """Literals 1..6 keyed by their symbol."""
    return {i: Literal(i) for i in range(1, 7)}


@pytest.fixture
def congruence_premise(literals):
    """Premise {1 = 3, 2 = 4}."""
    premise = Premise()
    premise.insert(literals[1], literals[3])
    premise.insert(literals[2], literals[4])
    return premise


@pytest.fixture
def congruence_terms():
    """(f(1, 2), f(3, 4), f(5, 6))."""
    return fun("f", 1, 2), fun("f", 3, 4), fun("f", 5, 6)


@pytest.fixture(
    params=[
        EngineConfig(ClosureStrategy.WORKLIST, cache_closure=True),
        EngineConfig(ClosureStrategy.WORKLIST, cache_closure=False),
        EngineConfig(ClosureStrategy.NAIVE, cache_closure=True),
        EngineConfig(ClosureStrategy.NAIVE, cache_closure=False),
    ],
    ids=["worklist-cached", "worklist-local", "naive-cached", "naive-local"],
)
def config(request):
    """Every engine configuration; decisions must not depend on it."""
    return request.param
