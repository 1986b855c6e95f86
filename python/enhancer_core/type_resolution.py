"""Type resolution: reduce type descriptors to their erased runtime class.

Strategies are registered and looked up by plain runtime classes, while
callers describe targets with full typing constructs (``list[int]``,
``Optional[str]``, ``TypeVar("T", bound=Base)``...). This module classifies
a descriptor into one closed ``TypeKind`` and reduces it to a raw class:

============  ==========================================  =================
Kind          Example                                     Raw type
============  ==========================================  =================
CLASS         ``int``, ``None``                           itself / NoneType
GENERIC       ``list[int]``, ``typing.Dict[str, int]``    origin
ARRAY         ``tuple[list[int], ...]``                   ``tuple``
TYPE_VAR      ``TypeVar("T")``                            ``object``
BOUNDED       ``TypeVar("T", bound=Base)``                raw type of bound
ANY           ``typing.Any``                              ``object``
OPTIONAL      ``Optional[int]``, ``int | None``           raw type of ``int``
ANNOTATED     ``Annotated[int, "meta"]``                  raw type of ``int``
NEW_TYPE      ``NewType("UserId", int)``                  raw type of ``int``
UNSUPPORTED   ``int | str``, ``Literal[1]``, ``"Fwd"``    TypeResolutionError
============  ==========================================  =================
"""

from __future__ import annotations

import collections.abc
import types
import typing
from enum import Enum
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from .exceptions import TypeResolutionError

NoneType = type(None)

# Sequences of characters/bytes are scalars here, never element containers.
_NON_CONTAINER_SEQUENCES: tuple[type, ...] = (str, bytes, bytearray, memoryview)


class TypeKind(str, Enum):
    """Closed classification of type descriptors."""

    CLASS = "class"
    GENERIC = "generic"
    ARRAY = "array"
    TYPE_VAR = "type_var"
    BOUNDED = "bounded"
    ANY = "any"
    OPTIONAL = "optional"
    ANNOTATED = "annotated"
    NEW_TYPE = "new_type"
    UNSUPPORTED = "unsupported"


def classify(descriptor: Any) -> TypeKind:
    """Classify a type descriptor.

    Args:
        descriptor: Any object that might describe a type.

    Returns:
        The TypeKind of the descriptor. Never raises.
    """
    if descriptor is None:
        return TypeKind.CLASS
    if descriptor is Any:
        return TypeKind.ANY
    if isinstance(descriptor, TypeVar):
        return TypeKind.BOUNDED if descriptor.__bound__ is not None else TypeKind.TYPE_VAR
    if isinstance(descriptor, typing.NewType):
        return TypeKind.NEW_TYPE

    # Checked before isinstance(type): some Python versions report
    # parameterized builtins like list[int] as instances of type.
    origin = get_origin(descriptor)
    if origin is Annotated:
        return TypeKind.ANNOTATED
    if origin is Union or origin is types.UnionType:
        args = get_args(descriptor)
        if len(args) == 2 and NoneType in args:
            return TypeKind.OPTIONAL
        return TypeKind.UNSUPPORTED
    if origin is tuple and _is_variadic_tuple(descriptor):
        return TypeKind.ARRAY
    if isinstance(origin, type):
        return TypeKind.GENERIC

    if isinstance(descriptor, type):
        return TypeKind.CLASS
    return TypeKind.UNSUPPORTED


def is_type_descriptor(value: Any) -> bool:
    """Return True if value is a type descriptor this module can reduce.

    ``None`` is not treated as a descriptor here; callers handle it as the
    null value.
    """
    return value is not None and classify(value) is not TypeKind.UNSUPPORTED


def raw_type(descriptor: Any) -> type:
    """Obtain the raw (erased) runtime class of a type descriptor.

    Args:
        descriptor: The type descriptor to reduce.

    Returns:
        The erased runtime class.

    Raises:
        TypeResolutionError: If the descriptor kind is not supported.

    Example:
        >>> raw_type(list[int])
        <class 'list'>
        >>> raw_type(Optional[str])
        <class 'str'>
        >>> raw_type(TypeVar("T"))
        <class 'object'>
    """
    kind = classify(descriptor)

    if kind is TypeKind.CLASS:
        return NoneType if descriptor is None else descriptor
    if kind is TypeKind.GENERIC:
        return raw_type(get_origin(descriptor))
    if kind is TypeKind.ARRAY:
        # Component must be reducible even though the erasure is always tuple.
        raw_type(get_args(descriptor)[0])
        return tuple
    if kind in (TypeKind.TYPE_VAR, TypeKind.ANY):
        return object
    if kind is TypeKind.BOUNDED:
        return raw_type(descriptor.__bound__)
    if kind is TypeKind.OPTIONAL:
        (inner,) = [arg for arg in get_args(descriptor) if arg is not NoneType]
        return raw_type(inner)
    if kind is TypeKind.ANNOTATED:
        return raw_type(get_args(descriptor)[0])
    if kind is TypeKind.NEW_TYPE:
        return raw_type(descriptor.__supertype__)

    raise TypeResolutionError(f"Cannot obtain raw type: {descriptor!r}")


def element_type(descriptor: Any) -> Any:
    """Obtain the element type of a homogeneous sequence type descriptor.

    The first type argument is returned as a descriptor (not erased), so
    nested generics like ``list[list[int]]`` yield ``list[int]``. A bounded
    type variable yields its bound; ``Any``, unbounded type variables and
    bare sequence classes yield ``object``.

    Args:
        descriptor: A sequence type such as ``list[int]`` or ``tuple[str, ...]``.

    Returns:
        The element type descriptor.

    Raises:
        TypeResolutionError: If the descriptor is not a homogeneous sequence.
    """
    if classify(descriptor) is TypeKind.ANNOTATED:
        return element_type(get_args(descriptor)[0])

    origin = get_origin(descriptor) or descriptor
    if not _is_sequence_class(origin):
        raise TypeResolutionError(
            f"The type must be a homogeneous sequence type: {descriptor!r}"
        )

    args = get_args(descriptor)
    if not args:
        return object

    if issubclass(origin, tuple):
        if not _is_variadic_tuple(descriptor):
            raise TypeResolutionError(
                f"The type must be a homogeneous sequence type: {descriptor!r}"
            )
    return _reduce_argument(args[0])


def _reduce_argument(argument: Any) -> Any:
    if argument is Any:
        return object
    if isinstance(argument, TypeVar):
        return argument.__bound__ if argument.__bound__ is not None else object
    return argument


def _is_variadic_tuple(descriptor: Any) -> bool:
    args = get_args(descriptor)
    return len(args) == 2 and args[1] is Ellipsis


def _is_sequence_class(candidate: Any) -> bool:
    return (
        isinstance(candidate, type)
        and issubclass(candidate, collections.abc.Sequence)
        and not issubclass(candidate, _NON_CONTAINER_SEQUENCES)
    )


__all__ = [
    "NoneType",
    "TypeKind",
    "classify",
    "is_type_descriptor",
    "raw_type",
    "element_type",
]
