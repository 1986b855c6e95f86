"""Extension-point interception: before/after hooks around named proxy points.

A proxy point is a named call site (``"parameter.accept"``,
``"payload.invoke"``, ``"output.print"``...). Interceptors registered for a
point name run around every invocation of that point:

1. Before-hooks run in ascending priority and share one mutable
   ProxyPointParameterView; a change made by one hook is visible to the next
   hook and to the invocation itself
2. The target is called with the (possibly modified) arguments
3. After-hooks run in ascending priority; each receives the current result
   and returns the result handed to the next hook; the last one wins

Interceptors registered for another point name are never consulted.

Example:
    >>> class TrimInput(ProxyPointInterceptor):
    ...     intercept_point = "parameter.accept"
    ...     priority = 1
    ...
    ...     def on_before(self, enhancer, view):
    ...         view[1] = view[1].strip()
    ...
    >>> interceptors = InterceptorRegistry([TrimInput()])
    >>> interceptors.invoke("parameter.accept", acceptor.accept, (int, " 42 "))
"""

from __future__ import annotations

import functools
from abc import ABC
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar

from .event_bridge import EventNames, publish_if_active
from .exceptions import PreconditionViolationError, assert_not_none
from .logging import log_debug
from .ordering import sort_by_order

PointResult = TypeVar("PointResult")
F = TypeVar("F", bound=Callable[..., Any])


class ProxyPointParameterView:
    """Mutable view of the arguments of one proxy point invocation.

    Integer keys address positional arguments, string keys address keyword
    arguments.

    Example:
        >>> view = ProxyPointParameterView("payload.invoke", (1, 2), {"k": 3})
        >>> view[0] = 10
        >>> view["k"]
        3
        >>> view.args
        (10, 2)
    """

    def __init__(
        self,
        point_name: str,
        args: Iterable[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        self._point_name = point_name
        self._args: list[Any] = list(args)
        self._kwargs: dict[str, Any] = dict(kwargs or {})

    @property
    def point_name(self) -> str:
        """Name of the proxy point being invoked."""
        return self._point_name

    @property
    def args(self) -> tuple[Any, ...]:
        """Current positional arguments."""
        return tuple(self._args)

    @property
    def kwargs(self) -> dict[str, Any]:
        """Copy of the current keyword arguments."""
        return dict(self._kwargs)

    def set_args(self, *args: Any) -> None:
        """Replace all positional arguments."""
        self._args = list(args)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, str):
            return self._kwargs[key]
        return self._args[key]

    def __setitem__(self, key: int | str, value: Any) -> None:
        if isinstance(key, str):
            self._kwargs[key] = value
        else:
            self._args[key] = value

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return key in self._kwargs
        if isinstance(key, int):
            return -len(self._args) <= key < len(self._args)
        return False

    def __len__(self) -> int:
        return len(self._args) + len(self._kwargs)

    def __repr__(self) -> str:
        return (
            f"ProxyPointParameterView(point_name={self._point_name!r}, "
            f"args={self.args!r}, kwargs={self._kwargs!r})"
        )


class ProxyPointInterceptor(ABC, Generic[PointResult]):
    """Base class for proxy point interceptors.

    Class Attributes:
        intercept_point: Name of the proxy point to intercept. Must be set.
        priority: Hook priority (lower = runs first, default 0).
    """

    intercept_point: ClassVar[str] = ""
    priority: int = 0

    @property
    def name(self) -> str:
        """Fully-qualified interceptor name."""
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    def on_before(self, enhancer: Any, parameter_view: ProxyPointParameterView) -> None:
        """Inspect or modify the arguments before the point is invoked.

        Args:
            enhancer: The enhancer running the invocation (may be None).
            parameter_view: Shared, mutable argument view.
        """

    def on_after(self, enhancer: Any, point_result: PointResult) -> PointResult:
        """Inspect or transform the point result.

        Args:
            enhancer: The enhancer running the invocation (may be None).
            point_result: Result of the point, or of the previous after-hook.

        Returns:
            The result handed to the next after-hook.
        """
        return point_result

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(intercept_point={self.intercept_point!r}, "
            f"priority={self.priority!r})"
        )


class InterceptorRegistry:
    """Frozen mapping of proxy point name to priority-ordered interceptors."""

    __slots__ = ("_points", "_frozen")

    def __init__(self, interceptors: Iterable[ProxyPointInterceptor[Any]] | None = ()) -> None:
        """Build and freeze the registry.

        Raises:
            PreconditionViolationError: If interceptors is None, or an entry
                is not a ProxyPointInterceptor with a point name.
        """
        assert_not_none(interceptors, "The interceptor list cannot be None.")

        points: dict[str, list[ProxyPointInterceptor[Any]]] = {}
        for interceptor in interceptors:  # type: ignore[union-attr]
            if not isinstance(interceptor, ProxyPointInterceptor):
                raise PreconditionViolationError(
                    f"Cannot register {interceptor!r}: not a ProxyPointInterceptor"
                )
            if not interceptor.intercept_point:
                raise PreconditionViolationError(
                    f"Interceptor {interceptor.name} does not name a proxy point"
                )
            points.setdefault(interceptor.intercept_point, []).append(interceptor)

        self._points: Mapping[str, tuple[ProxyPointInterceptor[Any], ...]] = MappingProxyType(
            {name: tuple(sort_by_order(group)) for name, group in points.items()}
        )
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__name__} is frozen; cannot set {name!r}")
        super().__setattr__(name, value)

    def interceptors_for(self, point_name: str) -> tuple[ProxyPointInterceptor[Any], ...]:
        """Return the interceptors for a point, in ascending priority."""
        return self._points.get(point_name, ())

    def point_names(self) -> list[str]:
        """Return the names of all intercepted points."""
        return list(self._points)

    def __contains__(self, point_name: object) -> bool:
        return point_name in self._points

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def invoke(
        self,
        point_name: str,
        target: Callable[..., Any],
        args: Iterable[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        enhancer: Any = None,
    ) -> Any:
        """Invoke a target through a named proxy point.

        Args:
            point_name: Proxy point name.
            target: The callable to invoke.
            args: Positional arguments for the target.
            kwargs: Keyword arguments for the target.
            enhancer: Context object handed to every hook.

        Returns:
            The target result after all after-hooks ran.

        Raises:
            PreconditionViolationError: If target is None.
            Any exception raised by a hook or by the target itself.
        """
        assert_not_none(target, "The proxy point target cannot be None.")

        interceptors = self.interceptors_for(point_name)
        view = ProxyPointParameterView(point_name, args, kwargs)

        for interceptor in interceptors:
            interceptor.on_before(enhancer, view)
        publish_if_active(EventNames.PROXY_POINT_BEFORE, point_name, view)

        result = target(*view.args, **view.kwargs)

        for interceptor in interceptors:
            result = interceptor.on_after(enhancer, result)
        publish_if_active(EventNames.PROXY_POINT_AFTER, point_name, result)

        if interceptors:
            log_debug(
                f"InterceptorRegistry: Invoked '{point_name}'",
                {"interceptors": len(interceptors)},
            )
        return result

    def proxy_point(self, point_name: str, enhancer: Any = None) -> Callable[[F], F]:
        """Decorate a callable so every call goes through ``invoke``.

        Example:
            >>> @interceptors.proxy_point("payload.invoke")
            ... def solve(nums):
            ...     return sorted(nums)
        """

        def decorator(func: F) -> F:
            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                return self.invoke(point_name, func, args, kwargs, enhancer)

            return wrapper  # type: ignore[return-value]

        return decorator

    def __repr__(self) -> str:
        return f"{type(self).__name__}(points={self.point_names()!r})"


__all__ = [
    "ProxyPointParameterView",
    "ProxyPointInterceptor",
    "InterceptorRegistry",
]
