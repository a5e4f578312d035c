from functools import reduce
from typing import Any, Callable, TypeVar

from .errors import PricingError
from .ftypes import Either

T = TypeVar('T')


def compose(*functions: Callable) -> Callable:
    """Right-to-left composition: compose(f, g, h)(x) = f(g(h(x)))"""
    def composed(arg: Any) -> Any:
        return reduce(lambda acc, f: f(acc), reversed(functions), arg)
    return composed


def pipe(value: T, *functions: Callable[..., Any]) -> Any:
    """Left-to-right pipeline: pipe(x, f, g, h) = h(g(f(x)))"""
    return reduce(lambda acc, f: f(acc), functions, value)


def either_pipe(value: T, *functions: Callable[[Any], Any]) -> Either[PricingError, Any]:
    """Pipeline that stops at the first PricingError and returns it as Left."""
    result: Either[PricingError, Any] = Either.right(value)
    for func in functions:
        result = result.bind(lambda x, func=func: Either.try_except(lambda: func(x)))
    return result
