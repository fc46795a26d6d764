import typing

from gain._exceptions import ImmutableInstanceError


class Immutable:
    """
    A ``__slots__`` base class whose instances refuse attribute assignment
    once built. Subclasses declare ``__slots__`` and populate them by calling
    ``super().__init__(**values)``.

    Equality compares the type and the slot values.
    """
    __slots__ = ()

    def __init__(self, **kwargs: typing.Any) -> None:
        for k, v in kwargs.items():
            object.__setattr__(self, k, v)

    def __getattr__(self, key: str) -> typing.Any:
        '''Solely for placating mypy'''
        return super().__getattribute__(key)

    def __setattr__(self, key, value):
        raise ImmutableInstanceError("cannot assign to field '{}'".format(key))

    def __delattr__(self, key):
        raise ImmutableInstanceError("cannot delete field '{}'".format(key))

    def _astuple(self) -> tuple:
        return tuple(
            getattr(self, k)
            for cls in type(self).__mro__
            for k in getattr(cls, '__slots__', ())
        )

    def __eq__(self, other: typing.Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return other._astuple() == self._astuple()

    def __hash__(self) -> int:
        return hash((type(self), self._astuple()))
