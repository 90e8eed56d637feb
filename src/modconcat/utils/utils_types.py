# src/modconcat/utils/utils_types.py


from types import UnionType
from typing import Any, Literal, TypeVar, Union, cast, get_args, get_origin, get_type_hints

from typing_extensions import NotRequired


T = TypeVar("T")


def cast_hint(typ: type[T], value: Any) -> T:  # noqa: ARG001
    """Explicit cast that documents intent but is purely for type hinting.

    This function performs *no runtime checks*.
    """
    return cast("T", value)


def schema_from_typeddict(td: type[Any]) -> dict[str, Any]:
    """Extract field names and their annotated types from a TypedDict."""
    return get_type_hints(td, include_extras=True)


def safe_isinstance(value: Any, expected_type: Any) -> bool:  # noqa: PLR0911
    """Like isinstance(), but understands the typing constructs used in configs.

    Supports Any, Literal, unions, NotRequired, list[...] and dict[..., ...].
    Callables and other unknown constructs are accepted.
    """
    if expected_type is Any:
        return True

    origin = get_origin(expected_type)
    args = get_args(expected_type)

    if origin is NotRequired:
        return safe_isinstance(value, args[0])
    if origin is Literal:
        return value in args
    if origin in (Union, UnionType):
        return any(safe_isinstance(value, arg) for arg in args)
    if origin is list:
        if not isinstance(value, list):
            return False
        return not args or all(safe_isinstance(v, args[0]) for v in value)  # pyright: ignore[reportUnknownVariableType]
    if origin is dict:
        if not isinstance(value, dict):
            return False
        if not args:
            return True
        key_type, val_type = args
        return all(
            safe_isinstance(k, key_type) and safe_isinstance(v, val_type)
            for k, v in value.items()  # pyright: ignore[reportUnknownVariableType]
        )
    if expected_type is type(None):
        return value is None
    if expected_type is float:
        # JSON has no separate int type for floats
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected_type is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(expected_type, type):
        return isinstance(value, expected_type)
    return True
