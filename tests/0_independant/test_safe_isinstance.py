# tests/0_independant/test_safe_isinstance.py
"""Focused tests for modconcat.utils.utils_types.safe_isinstance."""

from typing import Any, Literal

from typing_extensions import NotRequired

import modconcat.utils.utils_types as mod_utils_types


def test_plain_types_work_normally() -> None:
    # --- execute, and verify ---
    assert mod_utils_types.safe_isinstance("x", str)
    assert not mod_utils_types.safe_isinstance(123, str)
    assert mod_utils_types.safe_isinstance(123, int)


def test_union_types() -> None:
    # --- setup ---
    u = str | int

    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance("abc", u)
    assert mod_utils_types.safe_isinstance(42, u)
    assert not mod_utils_types.safe_isinstance(3.14, u)


def test_optional_types() -> None:
    # --- setup ---
    opt = int | None

    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance(5, opt)
    assert mod_utils_types.safe_isinstance(None, opt)
    assert not mod_utils_types.safe_isinstance("nope", opt)


def test_any_type_always_true() -> None:
    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance("anything", Any)
    assert mod_utils_types.safe_isinstance(None, Any)


def test_bool_is_not_an_int() -> None:
    # --- execute and verify ---
    assert not mod_utils_types.safe_isinstance(True, int)
    assert not mod_utils_types.safe_isinstance(False, float)
    assert mod_utils_types.safe_isinstance(2, float)  # JSON has one number type


def test_list_and_dict_element_types() -> None:
    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance([".js", ".json"], list[str])
    assert not mod_utils_types.safe_isinstance([".js", 1], list[str])
    assert not mod_utils_types.safe_isinstance(".js", list[str])
    assert mod_utils_types.safe_isinstance({"a": 1}, dict[str, int])
    assert not mod_utils_types.safe_isinstance({"a": "1"}, dict[str, int])


def test_bool_or_list_union_used_by_vendor_exclusion() -> None:
    # --- setup ---
    hint = bool | list[str]

    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance(True, hint)
    assert mod_utils_types.safe_isinstance(["left-pad"], hint)
    assert not mod_utils_types.safe_isinstance("left-pad", hint)


def test_literal_and_notrequired() -> None:
    # --- execute and verify ---
    assert mod_utils_types.safe_isinstance("cli", Literal["cli", "config"])
    assert not mod_utils_types.safe_isinstance("env", Literal["cli", "config"])
    assert mod_utils_types.safe_isinstance(1.5, NotRequired[float])
