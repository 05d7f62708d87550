import math

import numpy as np
import pytest

from integral.errors import TreeInvariantError
from integral.evaluator import evaluate
from integral.nodes import FUNCTIONS, NumNode, OpNode, VarNode, destroy_tree
from integral.parser import compile_tokens, tokenize


def value_of(text: str, x: float = 0.0) -> float:
    return evaluate(compile_tokens(tokenize(text)), x)


def test_division_by_zero_gives_infinities():
    assert value_of("1 0 /") == math.inf
    assert value_of("-1 0 /") == -math.inf
    assert math.isnan(value_of("0 0 /"))
    assert value_of("1 x /", 0.0) == math.inf


def test_domain_errors_propagate_as_ieee_values():
    assert value_of("0 ln") == -math.inf
    assert math.isnan(value_of("-1 ln"))
    assert math.isnan(value_of("-8 1 3 / ^"))
    assert value_of("0 -1 ^") == math.inf
    assert value_of("1000 exp") == math.inf
    assert value_of("1e308 10 *") == math.inf


def test_cotangent_of_zero_is_infinite():
    assert value_of("0 ctg") == math.inf


def test_power_with_integer_exponent_of_negative_base():
    assert value_of("-2 3 ^") == -8.0
    assert value_of("x 2 ^", -3.0) == 9.0


def test_scalar_input_returns_float():
    result = value_of("x 2 *", 1.5)
    assert isinstance(result, float)
    assert result == 3.0


def test_array_input_is_evaluated_elementwise():
    grid = np.linspace(0.0, 1.0, 5)
    node = compile_tokens(["x", "x", "*"])
    np.testing.assert_allclose(evaluate(node, grid), grid * grid)


def test_constant_expression_broadcasts_over_array():
    grid = np.arange(4, dtype=float)
    result = evaluate(compile_tokens(["7"]), grid)
    assert result.shape == (4,)
    assert np.all(result == 7.0)


def test_evaluation_is_repeatable():
    node = compile_tokens(tokenize("x sin x cos *"))
    assert evaluate(node, 0.3) == evaluate(node, 0.3)


def test_unknown_node_type_is_an_invariant_violation():
    with pytest.raises(TreeInvariantError):
        evaluate(object(), 1.0)


def test_unknown_operator_is_an_invariant_violation():
    with pytest.raises(TreeInvariantError):
        evaluate(OpNode("%", NumNode(1.0), NumNode(2.0)), 0.0)


def test_operator_missing_operand_is_an_invariant_violation():
    with pytest.raises(TreeInvariantError):
        evaluate(OpNode("+", VarNode("x"), None), 0.0)


def test_function_table_is_read_only():
    with pytest.raises(TypeError):
        FUNCTIONS["sqrt"] = np.sqrt


def test_destroy_tree_releases_every_node_once():
    node = compile_tokens(tokenize("x 2 * sin 1 +"))
    assert destroy_tree(node) == 6
    assert node.left is None and node.right is None
    assert destroy_tree(None) == 0


def test_destroy_tree_handles_deep_trees():
    tokens = ["x"] + ["sin"] * 5000
    node = compile_tokens(tokens)
    assert destroy_tree(node) == 5001


def test_deep_unary_chain_evaluates():
    node = compile_tokens(["x"] + ["exp", "ln"] * 1500)
    assert evaluate(node, 0.5) == pytest.approx(0.5, rel=1e-9)
    grid = np.array([0.25, 0.5, 1.0])
    np.testing.assert_allclose(evaluate(node, grid), grid, rtol=1e-9)


def test_deep_operator_chain_evaluates_left_to_right():
    # ((x - 1) - 1) - ... 3000 times
    node = compile_tokens(["x"] + ["1", "-"] * 3000)
    assert evaluate(node, 0.0) == -3000.0


def test_repr_of_deep_tree_does_not_recurse():
    node = compile_tokens(["x"] + ["sin"] * 5000)
    assert repr(node) == "FuncNode('sin')"
