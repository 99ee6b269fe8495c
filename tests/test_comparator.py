"""Tests for the nil-aware comparator."""

from __future__ import annotations

import gc
import weakref
from dataclasses import dataclass

import pytest

from ftest.assertions import Nil, NilKind, classify, equal, is_nil, nil


class Target:
    pass


def dead_ref() -> weakref.ReferenceType:
    obj = Target()
    ref = weakref.ref(obj)
    del obj
    gc.collect()
    return ref


@dataclass
class Product:
    name: str
    price: int


NIL_LIKE = [None, nil(), nil(list), nil(dict), dead_ref()]


class TestClassify:
    """Tests for the tri-state nil classification."""

    def test_none_is_absent(self) -> None:
        assert classify(None) == NilKind.ABSENT

    def test_typed_nil_is_uninitialized(self) -> None:
        assert classify(nil(list)) == NilKind.UNINITIALIZED
        assert classify(Nil()) == NilKind.UNINITIALIZED

    def test_dead_weakref_is_uninitialized(self) -> None:
        assert classify(dead_ref()) == NilKind.UNINITIALIZED

    def test_live_weakref_is_concrete(self) -> None:
        obj = Target()
        assert classify(weakref.ref(obj)) == NilKind.CONCRETE

    @pytest.mark.parametrize("value", [[], {}, "", (), 0, False, set()])
    def test_empty_values_are_concrete(self, value: object) -> None:
        assert classify(value) == NilKind.CONCRETE
        assert not is_nil(value)

    def test_nil_repr(self) -> None:
        assert repr(nil(list)) == "nil(list)"
        assert repr(nil()) == "nil()"
        assert not nil(list)


class TestEqual:
    """Tests for equal()."""

    @pytest.mark.parametrize("a", NIL_LIKE)
    @pytest.mark.parametrize("b", NIL_LIKE)
    def test_all_nil_like_pairs_are_equal(self, a: object, b: object) -> None:
        assert equal(a, b)

    @pytest.mark.parametrize("empty", [[], {}, ""])
    @pytest.mark.parametrize("nil_value", [None, nil(list)])
    def test_empty_container_is_not_nil(self, empty: object, nil_value: object) -> None:
        assert not equal(empty, nil_value)
        assert not equal(nil_value, empty)

    def test_no_type_coercion(self) -> None:
        assert not equal(22, "22")
        assert not equal(1, True)
        assert not equal(1, 1.0)

    def test_mappings_ignore_key_order(self) -> None:
        assert equal({"foo": "ok", "bar": "ok"}, {"bar": "ok", "foo": "ok"})
        assert not equal({"foo": "23"}, {"foo": "22"})
        assert not equal({"foo": "ok"}, {"foo": "ok", "bar": "ok"})

    def test_sequences_are_order_sensitive(self) -> None:
        assert equal([1, [2, 3]], [1, [2, 3]])
        assert not equal([1, 2], [2, 1])
        assert not equal([1, 2], [1, 2, 3])
        assert not equal([1, 2], (1, 2))

    def test_nested_values_compare_strictly(self) -> None:
        assert not equal({"a": [1]}, {"a": [True]})
        assert equal({"a": {"b": [None]}}, {"a": {"b": [None]}})

    def test_dataclasses_compare_by_fields(self) -> None:
        assert equal(Product("ok", 22), Product("ok", 22))
        assert not equal(Product("ok", 22), Product("ok", 23))

    @pytest.mark.parametrize(
        "a,b",
        [
            (22, "22"),
            ([], None),
            (nil(list), None),
            ({"a": 1}, {"a": 1}),
            ([1, 2], [2, 1]),
            (Product("x", 1), Product("x", 1)),
        ],
    )
    def test_symmetry(self, a: object, b: object) -> None:
        assert equal(a, b) == equal(b, a)


class TestHashCoercion:
    """Keys and set members that hash alike must still match by type."""

    @pytest.mark.parametrize(
        "a,b",
        [
            ({1: "a"}, {True: "a"}),
            ({1: "a"}, {1.0: "a"}),
            ({(1,): "a"}, {(True,): "a"}),
            ({1}, {True}),
            ({1, 2}, {1.0, 2}),
            (frozenset({1}), frozenset({True})),
            ({frozenset({1})}, {frozenset({True})}),
        ],
    )
    def test_no_coercion_in_keys_and_sets(self, a: object, b: object) -> None:
        assert not equal(a, b)
        assert not equal(b, a)

    def test_same_typed_keys_and_sets(self) -> None:
        assert equal({1: "b", 2: "c"}, {2: "c", 1: "b"})
        assert equal({1, "x", (2, 3)}, {(2, 3), "x", 1})
        assert equal(frozenset({1.5}), frozenset({1.5}))

    def test_set_of_tuples_is_strict(self) -> None:
        assert not equal({(1, 2)}, {(True, 2)})


class TestCyclicValues:
    def test_self_referencing_list(self) -> None:
        a: list = []
        a.append(a)
        assert equal(a, a)

    def test_distinct_cycles_of_same_shape(self) -> None:
        a: list = [1]
        a.append(a)
        b: list = [1]
        b.append(b)
        assert equal(a, b)

    def test_cycles_with_different_content(self) -> None:
        a: dict = {"v": 1}
        a["self"] = a
        b: dict = {"v": 2}
        b["self"] = b
        assert not equal(a, b)

    def test_shared_substructure_is_compared_each_time(self) -> None:
        shared = [1]
        assert equal([shared, shared], [[1], [1]])
        assert not equal([shared, [2]], [[1], [1]])
