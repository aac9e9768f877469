"""Runtime behavior tests for query language evaluation."""

from __future__ import annotations

import math

import pytest

from jqlite.query_language import (
    QueryIndexError,
    QueryIterateError,
    QueryNumericalError,
    QueryObjectKeyError,
    QueryOperationError,
    QueryRuntimeError,
    Stream,
    evaluate_expr,
    execute,
    parse_query,
)
from jqlite.query_language.ast import Expr


def _execute(query: str, value: object) -> list[object]:
    """Parse and execute query for one input value."""
    return execute(parse_query(query), value)


class _UnknownExpr(Expr):
    """Expression node the evaluator does not know about."""


def test_identity_returns_input() -> None:
    """Identity should return the input value unchanged."""
    value = {"a": [1, 2, {"b": None}]}
    assert _execute(".", value) == [value]
    assert _execute(".", None) == [None]


def test_evaluate_expr_returns_stream() -> None:
    """Evaluation should produce a stream container."""
    result = evaluate_expr(parse_query(".[]"), [1, 2])
    assert isinstance(result, Stream)
    assert result == [1, 2]


def test_field_access() -> None:
    """Field access should return value, null for missing keys and null input."""
    assert _execute(".foo", {"foo": 42, "bar": "less interesting data"}) == [42]
    assert _execute(".foo", {"notfoo": True, "alsonotfoo": False}) == [None]
    assert _execute(".foo", None) == [None]
    assert _execute('."foo bar"', {"foo bar": 1}) == [1]
    assert _execute('.["foo"]', {"foo": 42}) == [42]


def test_field_access_on_scalar_raises() -> None:
    """Field access on non-object values should fail with an index error."""
    with pytest.raises(QueryIndexError, match="Cannot index number with string"):
        _execute(".foo", 1)
    with pytest.raises(QueryIndexError, match="Cannot index array with string"):
        _execute(".foo", [1])


def test_optional_field_suppresses_errors() -> None:
    """Optional access should swallow errors and produce nothing."""
    assert _execute(".foo?", {"foo": 42}) == [42]
    assert _execute(".foo?", {"notfoo": True}) == [None]
    assert _execute('.["foo"]?', {"foo": 42}) == [42]
    assert _execute("[ .foo? ]", [1, 2]) == [[]]
    assert _execute("[.[] | .foo?]", [1, [2], {"foo": 3}]) == [[3]]


def test_optional_only_suppresses_failing_item() -> None:
    """Items before and after a failing item should still be produced."""
    assert _execute(".[] | (1 / .)?", [1, 0, -1]) == [1, -1]
    assert _execute(".[] | .a?", [{"a": 1}, "x", {"a": 2}]) == [1, 2]


def test_optional_group_absorbs_whole_error() -> None:
    """An error anywhere inside a grouped optional yields no output."""
    assert _execute("(.a, .b.c)?", {"a": 1, "b": 5}) == []
    assert _execute("(.a, .b.c)?", {"a": 1, "b": {"c": 2}}) == [1, 2]


def test_array_index() -> None:
    """Array index should support negative positions and missing indexes."""
    value = [1, 2, 3]
    assert _execute(".[0]", value) == [1]
    assert _execute(".[-2]", value) == [2]
    assert _execute(".[-1]", value) == [3]
    assert _execute(".[3]", value) == [None]
    assert _execute(".[-4]", value) == [None]
    assert _execute(".[0]", None) == [None]
    assert _execute(".[1.7]", value) == [2]


def test_array_index_errors() -> None:
    """Wrong key types should raise index and object key errors."""
    with pytest.raises(QueryIndexError, match="Cannot index string with number"):
        _execute(".[0]", "abc")
    with pytest.raises(QueryObjectKeyError, match="Cannot use number as object key"):
        _execute(".[0]", {"0": 1})
    with pytest.raises(QueryIndexError, match="Cannot index array with boolean"):
        _execute(".[true]", [1])
    with pytest.raises(QueryObjectKeyError, match="Cannot use null as object key"):
        _execute(".[null]", {"a": 1})


def test_computed_index_is_evaluated_against_input() -> None:
    """Index keys should be sub-queries evaluated on the indexed value."""
    value = {"key": "name", "name": "Ada"}
    assert _execute(".[.key]", value) == ["Ada"]
    assert _execute(".[0, 2]", [10, 20, 30]) == [10, 30]


def test_array_slice() -> None:
    """Slices should return sub-arrays with clamped bounds."""
    value = ["a", "b", "c", "d", "e"]
    assert _execute(".[2:4]", value) == [["c", "d"]]
    assert _execute(".[:3]", value) == [["a", "b", "c"]]
    assert _execute(".[-2:]", value) == [["d", "e"]]
    assert _execute(".[:]", value) == [value]
    assert _execute(".[4:2]", value) == [[]]
    assert _execute(".[10:20]", value) == [[]]
    assert _execute(".[-10:2]", value) == [["a", "b"]]
    assert _execute(".[1.2:2.5]", value) == [["b", "c"]]


def test_string_slice() -> None:
    """Slices should also apply to strings."""
    assert _execute(".[2:4]", "abcdefghi") == ["cd"]
    assert _execute(".[-3:]", "abcdefghi") == ["ghi"]
    assert _execute(".[5:1]", "abcdefghi") == [""]


def test_slice_errors() -> None:
    """Slicing non-sequences or with non-numeric bounds should fail."""
    with pytest.raises(QueryIndexError, match="Cannot index object with range"):
        _execute(".[1:2]", {"a": 1})
    with pytest.raises(QueryIndexError, match="Cannot index array with string"):
        _execute('.["a":]', [1, 2])
    with pytest.raises(QueryIndexError, match="Cannot index null with range"):
        _execute(".[1:2]", None)


def test_iterate_arrays_and_objects() -> None:
    """Iteration should produce elements and object values in order."""
    assert _execute(".[]", [{"name": "JSON", "good": True}, {"name": "XML", "good": False}]) == [
        {"name": "JSON", "good": True},
        {"name": "XML", "good": False},
    ]
    assert _execute(".[]", {"a": 1, "b": 1}) == [1, 1]
    assert _execute(".[]", []) == []


def test_iterate_errors() -> None:
    """Iterating scalars should fail unless optional."""
    with pytest.raises(QueryIterateError, match="Cannot iterate over number"):
        _execute(".[]", 1)
    with pytest.raises(QueryIterateError, match="Cannot iterate over null"):
        _execute(".[]", None)
    assert _execute(".[]?", 1) == []


def test_split_concatenates_streams() -> None:
    """Comma should produce left outputs, then right outputs."""
    value = {"foo": 42, "bar": "something else", "baz": True}
    assert _execute(".foo, .bar", value) == [42, "something else"]
    value = {"user": "stedolan", "projects": ["jq", "wikiflow"]}
    assert _execute(".user, .projects[]", value) == ["stedolan", "jq", "wikiflow"]


def test_pipe_feeds_every_output() -> None:
    """Pipe should run right side for each left output, in order."""
    value = [{"name": "JSON", "good": True}, {"name": "XML", "good": False}]
    assert _execute(".[] | .name", value) == ["JSON", "XML"]
    assert _execute(".[] | .[]", [[1, 2], [3]]) == [1, 2, 3]


def test_pipe_stops_at_first_error() -> None:
    """Errors inside a pipe should abort the whole evaluation."""
    with pytest.raises(QueryIndexError):
        _execute(".[] | .a", [{"a": 1}, 2])


def test_recursive_descent_visits_every_value() -> None:
    """Recursive descent should yield all values in pre-order."""
    value = [[{"a": 1}]]
    assert _execute("..", value) == [value, [{"a": 1}], {"a": 1}, 1]
    assert _execute(".. | .a?", value) == [1]
    assert len(_execute("..", {"a": [1, {"b": 2}], "c": "x"})) == 6


def test_array_construction() -> None:
    """Array construction should collect the whole stream into one array."""
    value = {"user": "stedolan", "projects": ["jq", "wikiflow"]}
    assert _execute("[ .user, .projects[] ]", value) == [["stedolan", "jq", "wikiflow"]]
    assert _execute("[]", value) == [[]]
    assert _execute("[.[] | . * 2]", [1, 2, 3]) == [[2, 4, 6]]


def test_object_construction() -> None:
    """Object construction should produce one object per combination."""
    value = {"user": "stedolan", "titles": ["JQ Primer", "More JQ"]}
    assert _execute("{ user, title : .titles[] }", value) == [
        {"user": "stedolan", "title": "JQ Primer"},
        {"user": "stedolan", "title": "More JQ"},
    ]
    assert _execute("{ (.user): .titles }", value) == [
        {"stedolan": ["JQ Primer", "More JQ"]}
    ]
    assert _execute("{}", value) == [{}]
    assert _execute('{"a b": 1}', None) == [{"a b": 1}]


def test_object_construction_order_first_entry_slowest() -> None:
    """The first entry should vary slowest across produced objects."""
    assert _execute("{a: (1, 2), b: (3, 4)}", None) == [
        {"a": 1, "b": 3},
        {"a": 1, "b": 4},
        {"a": 2, "b": 3},
        {"a": 2, "b": 4},
    ]


def test_object_construction_with_multiple_keys() -> None:
    """A key query with several outputs should multiply objects."""
    assert _execute('{("a", "b"): 1}', None) == [{"a": 1}, {"b": 1}]


def test_object_construction_empty_value_stream() -> None:
    """An entry whose value stream is empty should produce no objects."""
    assert _execute("{a: .[]}", []) == []


def test_object_construction_non_string_key_aborts() -> None:
    """A non-string key should fail the whole construction."""
    with pytest.raises(QueryObjectKeyError, match="Cannot use number as object key"):
        _execute('{(.[]): 1}', ["a", 1, "b"])
    assert _execute('{(.[]): 1}?', ["a", 1, "b"]) == []


def test_binary_op_cartesian_order() -> None:
    """Left outputs should vary slower than right outputs."""
    assert _execute("(1, 2) + (10, 20)", None) == [11, 21, 12, 22]
    assert _execute("[.[] + 1]", [1, 2]) == [[2, 3]]


@pytest.mark.parametrize(
    ("query", "value", "expected"),
    [
        (".a + 1", {"a": 7}, [8]),
        (".a + .b", {"a": [1, 2], "b": [3, 4]}, [[1, 2, 3, 4]]),
        (".a + null", {"a": 1}, [1]),
        ("null + .a", {"a": 1}, [1]),
        ("null + null", None, [None]),
        ('"abc" + "def"', None, ["abcdef"]),
        ("{a: 1} + {b: 2} + {c: 3} + {a: 42}", None, [{"a": 42, "b": 2, "c": 3}]),
        ("4 - .a", {"a": 3}, [1]),
        ('. - ["xml", "yaml"]', ["xml", "yaml", "json"], [["json"]]),
        (". - [1]", [1, True, 1.0, 2], [[True, 2]]),
        ("10 / . * 3", 5, [6]),
        ('. / ", "', "a, b,c,d, e", [["a", "b,c,d", "e"]]),
        ('. / ","', "", [[]]),
        ("7 / 2", None, [3.5]),
        ("2 * 3", None, [6]),
        ("1.5 * 2", None, [3.0]),
        (
            '{"k": {"a": 1, "b": 2}} * {"k": {"a": 0,"c": 3}}',
            None,
            [{"k": {"a": 0, "b": 2, "c": 3}}],
        ),
        ('{"k": {"a": 1}} * {"k": 2}', None, [{"k": 2}]),
    ],
)
def test_binary_operators(query: str, value: object, expected: list[object]) -> None:
    """Operators should dispatch on operand types."""
    assert _execute(query, value) == expected


def test_integer_division_keeps_integer_type() -> None:
    """Exact integer division should yield an integer."""
    result = _execute("10 / 5", None)
    assert result == [2]
    assert isinstance(result[0], int)


@pytest.mark.parametrize(
    ("query", "value", "message"),
    [
        ("1 + .", "a", "Cannot add number and string"),
        (". + 1", [1], "Cannot add array and number"),
        ('. - "a"', "abc", "Cannot subtract string and string"),
        ("{} - {}", None, "Cannot subtract object and object"),
        ('"a" * 2', None, "Cannot multiply string and number"),
        ("[1] * [2]", None, "Cannot multiply array and array"),
        ("null / 1", None, "Cannot divide null and number"),
        ('. / ""', "abc", "Cannot divide string and string"),
        ("true + 1", None, "Cannot add boolean and number"),
    ],
)
def test_binary_operator_type_errors(query: str, value: object, message: str) -> None:
    """Unsupported operand pairs should raise operation errors."""
    with pytest.raises(QueryOperationError, match=message):
        _execute(query, value)


def test_division_by_zero_raises_numerical_error() -> None:
    """Division by zero should be a numerical error."""
    with pytest.raises(QueryNumericalError, match="Numerical operation was not possible"):
        _execute("1 / 0", None)
    with pytest.raises(QueryNumericalError):
        _execute("1.5 / 0.0", None)


def test_float_overflow_raises_numerical_error() -> None:
    """Non-finite arithmetic results should be numerical errors."""
    with pytest.raises(QueryNumericalError):
        _execute(". * .", 1e308)
    with pytest.raises(QueryNumericalError):
        _execute(". + .", 1.7e308)


def test_operator_errors_are_runtime_errors() -> None:
    """Every evaluation failure should share the runtime error base."""
    for query, value in [(".[]", 1), (".a", 1), ("1 / 0", None), ("1 + .", "x")]:
        with pytest.raises(QueryRuntimeError):
            _execute(query, value)


def test_literal_values_ignore_input() -> None:
    """Literals should produce their value for any input."""
    assert _execute("null, true, false, 1.5, -7", {"a": 1}) == [None, True, False, 1.5, -7]
    assert _execute('"x"', None) == ["x"]


def test_nan_input_index_returns_null() -> None:
    """Non-finite index positions should produce null."""
    assert _execute(".[.[0]]", [math.nan]) == [None]


def test_unknown_expression_raises_runtime_error() -> None:
    """Evaluating an unsupported node should fail with a runtime error."""
    with pytest.raises(QueryRuntimeError, match="Unsupported expression type"):
        execute(_UnknownExpr(), None)


@pytest.mark.parametrize("query", ["{(1): .[]}", "{a: .[], (1): 2}", "{(1): 2, b: .[]}"])
def test_object_construction_without_combinations_ignores_key_types(query: str) -> None:
    """No object is built when a stream is empty, so bad keys are never checked."""
    assert _execute(query, []) == []


def test_recursive_descent_on_deeply_nested_value() -> None:
    """Recursive descent should handle values nested deeper than the call stack."""
    value: object = 1
    for _ in range(2000):
        value = [value]

    result = _execute("..", value)

    assert len(result) == 2001
    assert result[0] is value
    assert result[-1] == 1
