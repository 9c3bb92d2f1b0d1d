from __future__ import annotations

import copy

from qsub.core.normalize import collect_var_ids, normalize_var_ids
from qsub.core.structure import to_structure


def test_renumbers_by_first_occurrence() -> None:
    tree = [39, [[15, ["t"]], [69, [[2, [812]], [17, [[170, [[10, [812]], "k"]], 1]]]]]]
    assert normalize_var_ids(tree) == [
        39,
        [[15, ["t"]], [69, [[2, [1]], [17, [[170, [[10, [1]], "k"]], 1]]]]],
    ]


def test_multi_parameter_function_keeps_order() -> None:
    tree = [69, [[2, [30, 31]], [17, [[10, [31]], [10, [30]]]]]]
    assert normalize_var_ids(tree) == [69, [[2, [1, 2]], [17, [[10, [2]], [10, [1]]]]]]


def test_nested_functions_keep_distinct_variables() -> None:
    inner = [69, [[2, [55]], [17, [[10, [55]], [10, [54]]]]]]
    tree = [38, [[15, ["t"]], [69, [[2, [54]], [39, [[15, ["u"]], inner]]]]]]
    out = normalize_var_ids(tree)
    assert collect_var_ids(out) == [1, 2]
    assert out[1][1][1][1][1][1] == [69, [[2, [2]], [17, [[10, [2]], [10, [1]]]]]]


def test_structurally_different_trees_stay_different() -> None:
    same_var = [69, [[2, [4, 5]], [17, [[10, [4]], [10, [4]]]]]]
    other_var = [69, [[2, [4, 5]], [17, [[10, [4]], [10, [5]]]]]]
    assert normalize_var_ids(same_var) != normalize_var_ids(other_var)


def test_input_not_mutated() -> None:
    tree = {"f": [69, [[2, [9]], [10, [9]]]], "n": [1, 2]}
    before = copy.deepcopy(tree)
    out = normalize_var_ids(tree)
    assert tree == before
    assert out == {"f": [69, [[2, [1]], [10, [1]]]], "n": [1, 2]}


def test_mapping_values_walked_in_emission_order() -> None:
    tree = {"b": [10, [20]], "a": [10, [10]]}
    assert normalize_var_ids(tree) == {"b": [10, [1]], "a": [10, [2]]}
    assert list(normalize_var_ids(tree)) == ["b", "a"]


def test_non_matching_shapes_untouched() -> None:
    tree = [2, [[10, [True]], [10, ["x"]], [69, [[2, ["a"]], 1]], [10, [1, 2]]]]
    assert normalize_var_ids(tree) == tree
    assert collect_var_ids(tree) == []


def test_custom_term_codes_and_start() -> None:
    tree = ["fn", [["arr", [7]], ["var", [7]]]]
    out = normalize_var_ids(tree, func_term="fn", var_term="var", make_array_term="arr", start=0)  # type: ignore[arg-type]
    assert out == tree
    tree = [100, [[200, [7]], [300, [7]]]]
    out = normalize_var_ids(tree, func_term=100, var_term=300, make_array_term=200, start=0)
    assert out == [100, [[200, [0]], [300, [0]]]]


def test_builder_counter_drift_removed(r) -> None:
    a = to_structure(r.table("t").filter(lambda x: x["k"] == 1))
    r.func(lambda p, q, s: p)
    b = to_structure(r.table("t").filter(lambda x: x["k"] == 1))
    assert a != b
    assert normalize_var_ids(a) == normalize_var_ids(b)
