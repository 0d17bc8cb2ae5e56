"""Tests for function reconstruction and the predicate calling convention."""

import pytest

from perfect_validator.core.exceptions import FunctionReconstructionError
from perfect_validator.functions import (
    FunctionForm,
    ModelFunction,
    call_predicate,
    canonical_source,
    compile_function,
    positional_arity,
)


def test_compile_lambda():
    """Test that a lambda is rebuilt with its parameters."""
    is_adult = compile_function("lambda age: age >= 18")
    assert isinstance(is_adult, ModelFunction)
    assert is_adult.form is FunctionForm.LAMBDA
    assert is_adult.params == ("age",)
    assert is_adult(21) is True
    assert is_adult(15) is False


def test_compile_block():
    """Test that a def block is rebuilt and runs with safe builtins."""
    source = "def small_plan(features, plan):\n    return plan != 'FREE' or len(features) <= 3"
    check = compile_function(source)
    assert check.form is FunctionForm.BLOCK
    assert check(["a", "b"], "FREE") is True
    assert check(["a", "b", "c", "d"], "FREE") is False


def test_canonical_source_is_stable():
    """Test that canonicalization is idempotent."""
    canonical = canonical_source("lambda  x :   x>1")
    assert canonical == "lambda x: x > 1"
    assert canonical_source(canonical) == canonical
    assert compile_function("lambda  x :   x>1").source == canonical


def test_equality_follows_source():
    """Test that rebuilt functions compare by canonical source."""
    assert compile_function("lambda x: x > 1") == compile_function("lambda x:x>1")
    assert compile_function("lambda x: x > 1") != compile_function("lambda x: x > 2")


def test_builtins_are_restricted():
    """Test that only the safe builtins are reachable at call time."""
    with pytest.raises(FunctionReconstructionError):
        compile_function("lambda x: print(x)")


def test_call_predicate_trims_arguments():
    """Test that predicates receive only as many arguments as they declare."""
    assert call_predicate(lambda value: value == 1, 1, 2, {"a": 1}) is True
    assert call_predicate(lambda value, other: value < other, 1, 2, {}) is True
    assert call_predicate(lambda *args: len(args), 1, 2, 3) == 3
    assert call_predicate(compile_function("lambda a, b, data: data['k']"), 1, 2, {"k": "v"}) == "v"


def test_positional_arity():
    """Test arity detection for the callables models may hold."""
    assert positional_arity(lambda a, b: None) == 2
    assert positional_arity(compile_function("lambda a: a")) == 1
    assert positional_arity(lambda *args: None) is None
