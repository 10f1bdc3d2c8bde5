from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


# Outcome of looking a typed name up in a reference list.

class Resolution(Generic[T], ABC):

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def is_matched(self) -> bool:
        pass


class Matched(Resolution[T]):

    def __init__(self, entity: T):
        self.entity = entity

    @property
    def name(self) -> str:
        return self.entity.name

    def is_matched(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Matched({self.entity!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Matched) and self.entity == other.entity


class Unmatched(Resolution[T]):

    def __init__(self, raw_name: str):
        self.raw_name = raw_name

    @property
    def name(self) -> str:
        return self.raw_name

    def is_matched(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Unmatched({self.raw_name!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Unmatched) and self.raw_name == other.raw_name
