from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar

from .errors import PricingError

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T]):
    """Optional value used for catalog lookups."""

    @classmethod
    def just(cls, value: T) -> 'Maybe[T]':
        return _Just(value)

    @classmethod
    def nothing(cls) -> 'Maybe[T]':
        return _NOTHING

    @classmethod
    def from_nullable(cls, value: Optional[T]) -> 'Maybe[T]':
        return cls.just(value) if value is not None else cls.nothing()

    @classmethod
    def first(cls, items: Iterable[T], predicate: Callable[[T], bool]) -> 'Maybe[T]':
        """First item matching `predicate`, or Nothing."""
        for item in items:
            if predicate(item):
                return cls.just(item)
        return cls.nothing()

    def map(self, func: Callable[[T], U]) -> 'Maybe[U]':
        raise NotImplementedError

    def bind(self, func: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        raise NotImplementedError

    def get_or_else(self, default: T) -> T:
        raise NotImplementedError

    def is_just(self) -> bool:
        raise NotImplementedError

    def is_nothing(self) -> bool:
        return not self.is_just()

    def or_raise(self, error: Exception) -> T:
        if self.is_nothing():
            raise error
        return self.get_or_else(None)

    def to_either(self, error: E) -> 'Either[E, T]':
        if self.is_just():
            return Either.right(self.get_or_else(None))
        return Either.left(error)


class _Just(Maybe[T]):
    __slots__ = ('_value',)

    def __init__(self, value: T):
        self._value = value

    def map(self, func: Callable[[T], U]) -> 'Maybe[U]':
        return Maybe.just(func(self._value))

    def bind(self, func: Callable[[T], Maybe[U]]) -> 'Maybe[U]':
        return func(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_just(self) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Just) and self._value == other._value

    def __repr__(self) -> str:
        return f"Just({self._value!r})"


class _Nothing(Maybe[Any]):
    def map(self, func: Callable[[Any], U]) -> 'Maybe[U]':
        return self

    def bind(self, func: Callable[[Any], Maybe[U]]) -> 'Maybe[U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_just(self) -> bool:
        return False

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Nothing)

    def __repr__(self) -> str:
        return "Nothing"


_NOTHING = _Nothing()


class Either(Generic[E, T]):
    """Result of a computation that may fail with an error value."""

    @classmethod
    def right(cls, value: T) -> 'Either[E, T]':
        return _Right(value)

    @classmethod
    def left(cls, error: E) -> 'Either[E, T]':
        return _Left(error)

    @classmethod
    def try_except(cls, func: Callable[[], T],
                   error_type: type = PricingError) -> 'Either[PricingError, T]':
        """Run `func`, capturing `error_type` as Left. Other exceptions propagate."""
        try:
            return cls.right(func())
        except error_type as e:
            return cls.left(e)

    def map(self, func: Callable[[T], U]) -> 'Either[E, U]':
        raise NotImplementedError

    def bind(self, func: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        raise NotImplementedError

    def get_or_else(self, default: T) -> T:
        raise NotImplementedError

    def is_right(self) -> bool:
        raise NotImplementedError

    def is_left(self) -> bool:
        return not self.is_right()

    def map_error(self, func: Callable[[E], Any]) -> 'Either[Any, T]':
        raise NotImplementedError

    def fold(self, on_left: Callable[[E], U], on_right: Callable[[T], U]) -> U:
        raise NotImplementedError


class _Right(Either[Any, T]):
    __slots__ = ('_value',)

    def __init__(self, value: T):
        self._value = value

    def map(self, func: Callable[[T], U]) -> 'Either[Any, U]':
        return Either.right(func(self._value))

    def bind(self, func: Callable[[T], Either[Any, U]]) -> 'Either[Any, U]':
        return func(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def map_error(self, func: Callable[[Any], Any]) -> 'Either[Any, T]':
        return self

    def fold(self, on_left: Callable[[Any], U], on_right: Callable[[T], U]) -> U:
        return on_right(self._value)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Right) and self._value == other._value

    def __repr__(self) -> str:
        return f"Right({self._value!r})"


class _Left(Either[E, Any]):
    __slots__ = ('_error',)

    def __init__(self, error: E):
        self._error = error

    def map(self, func: Callable[[Any], Any]) -> 'Either[E, Any]':
        return self

    def bind(self, func: Callable[[Any], Either[E, Any]]) -> 'Either[E, Any]':
        return self

    def get_or_else(self, default: Any) -> Any:
        return default

    def is_right(self) -> bool:
        return False

    def map_error(self, func: Callable[[E], Any]) -> 'Either[Any, Any]':
        return Either.left(func(self._error))

    def fold(self, on_left: Callable[[E], U], on_right: Callable[[Any], U]) -> U:
        return on_left(self._error)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Left) and self._error == other._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"


def partition(results: Iterable[Either[E, T]]) -> Tuple[Tuple[E, ...], Tuple[T, ...]]:
    """Split results into (errors, values), preserving order within each."""
    errors = []
    values = []
    for result in results:
        result.fold(errors.append, values.append)
    return tuple(errors), tuple(values)
