import inspect
import logging
import typing

from gain._exceptions import NoConstructorFoundError
import gain._immutable as immutable
from gain._marker import empty
from gain._utils import fullname, introspect_signature, typename

logger = logging.getLogger(__name__)

POSITIONAL_ONLY = inspect.Parameter.POSITIONAL_ONLY
POSITIONAL_OR_KEYWORD = inspect.Parameter.POSITIONAL_OR_KEYWORD
VAR_POSITIONAL = inspect.Parameter.VAR_POSITIONAL
KEYWORD_ONLY = inspect.Parameter.KEYWORD_ONLY
VAR_KEYWORD = inspect.Parameter.VAR_KEYWORD

_CONSTRUCTOR_MARKER = '__gain_constructor__'

_TYPE_CLASSMETHOD_FUNC = typing.Union[
    classmethod,
    typing.Callable[..., typing.Any],
]


def constructor(method: _TYPE_CLASSMETHOD_FUNC) -> classmethod:
    """
    Mark a classmethod as an alternate public constructor of its class, to be
    considered alongside the class itself by :func:`~gain.find_constructor`.
    Plain functions are wrapped in :func:`classmethod`.

    Usage::

        class Money:
            def __init__(self, amount):
                self.amount = amount
                self.currency = 'USD'

            @gain.constructor
            def of(cls, amount, currency):
                money = cls(amount)
                object.__setattr__(money, 'currency', currency)
                return money

    :param method: a classmethod or a function taking ``cls``
    :return: the marked classmethod
    """
    if not isinstance(method, classmethod):
        method = classmethod(method)
    setattr(method.__func__, _CONSTRUCTOR_MARKER, True)
    return method


def is_constructor(attr: typing.Any) -> bool:
    """
    Checks whether a class attribute is a classmethod marked with
    :func:`~gain.constructor`.
    """
    return isinstance(attr, classmethod) and \
        getattr(attr.__func__, _CONSTRUCTOR_MARKER, False)


class ParameterDescriptor(immutable.Immutable):
    """
    An immutable description of a named constructor parameter.

    :param name: the name of the parameter
    :param kind: the :term:`parameter kind`; one of the
        :class:`inspect.Parameter` kinds except the variadic ones
    :param type: the declared type of the parameter, or :class:`~gain.empty`
    """
    __slots__ = ('name', 'kind', 'type')

    def __init__(
            self,
            name: str,
            kind: inspect._ParameterKind = POSITIONAL_OR_KEYWORD,
            type: typing.Any = empty
        ) -> None:
        # pylint: disable=W0622, redefined-builtin
        super().__init__(name=name, kind=kind, type=empty.ccoerce(type))

    def __str__(self) -> str:
        if self.type is empty:
            return self.name
        return '{}: {}'.format(self.name, typename(self.type))

    def __repr__(self) -> str:
        return '<{} {}>'.format(type(self).__name__, self)

    @classmethod
    def from_native(cls, native: inspect.Parameter) -> 'ParameterDescriptor':
        """
        A factory method that creates a
        :class:`~gain.ParameterDescriptor` from an :class:`inspect.Parameter`.
        """
        return cls(native.name, native.kind, native.annotation)


class ConstructorDescriptor(immutable.Immutable):
    """
    An immutable description of a public constructor: the callable that
    materializes instances, and its ordered, named parameters.

    Variadic parameters (``*args`` and ``**kwargs``) aren't described; they
    aren't counted towards the size of the constructor and are never supplied
    arguments by a :class:`~gain.RebuildPlan`.

    :param callable: the class itself, or a bound alternate constructor
    :param name: the public name of the constructor
    :param parameters: the named parameters, in declaration order
    """
    __slots__ = ('callable', 'name', 'parameters')

    def __init__(
            self,
            callable: typing.Callable[..., typing.Any],
            name: str,
            parameters: typing.Iterable[ParameterDescriptor] = ()
        ) -> None:
        # pylint: disable=W0622, redefined-builtin
        super().__init__(
            callable=callable,
            name=name,
            parameters=tuple(parameters),
        )

    def __len__(self) -> int:
        return len(self.parameters)

    def __str__(self) -> str:
        return '{}({})'.format(
            self.name,
            ', '.join(str(param) for param in self.parameters),
        )

    def __repr__(self) -> str:
        return '<{} {}>'.format(type(self).__name__, self)

    @classmethod
    def from_callable(
            cls,
            callable: typing.Callable[..., typing.Any],
            name: typing.Optional[str] = None,
        ) -> 'ConstructorDescriptor':
        """
        A factory method that creates a :class:`~gain.ConstructorDescriptor`
        from the signature of a class or a bound alternate constructor.

        :param callable: the class or bound classmethod
        :param name: the public name; defaults to ``callable.__qualname__``
        :raises ValueError: if no signature can be provided for
            :paramref:`.ConstructorDescriptor.from_callable.callable`
        :raises TypeError: if the callable isn't supported by :mod:`inspect`
        """
        # pylint: disable=W0622, redefined-builtin
        signature = introspect_signature(callable)
        return cls(
            callable,
            name or callable.__qualname__,
            [
                ParameterDescriptor.from_native(param)
                for param in signature.parameters.values()
                if param.kind not in (VAR_POSITIONAL, VAR_KEYWORD)
            ],
        )


def iter_constructors(cls: type) -> typing.Iterator[ConstructorDescriptor]:
    """
    Iterate over the public constructors of a type, in this order:

    #. the type itself, unless it's abstract or its signature can't be \
    introspected
    #. alternate constructors marked with :func:`~gain.constructor` that \
    aren't underscore-prefixed, walking the MRO from the most derived class \
    and, within a class, in definition order. A more derived class attribute \
    shadows a same-named one on a base class.

    :param cls: the type whose constructors are enumerated
    :return: an iterator of :class:`~gain.ConstructorDescriptor`
    """
    if not inspect.isabstract(cls):
        try:
            yield ConstructorDescriptor.from_callable(cls, cls.__qualname__)
        except (TypeError, ValueError) as exc:
            logger.debug(
                'Signature of %s is not available: %s', fullname(cls), exc
            )

    seen = set()  # type: typing.Set[str]
    for base in cls.__mro__:
        for name, attr in vars(base).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith('_') or not is_constructor(attr):
                continue
            yield ConstructorDescriptor.from_callable(
                getattr(cls, name),
                '{}.{}'.format(cls.__qualname__, name),
            )


def find_constructor(cls: type) -> ConstructorDescriptor:
    """
    Find the most complete public constructor of a type: the one with the
    greatest number of named parameters. Ties are won by the constructor
    enumerated first by :func:`~gain._constructor.iter_constructors`, i.e. the
    type itself wins over alternate constructors.

    :param cls: the type to find the constructor of
    :raises NoConstructorFoundError: if the type has no public constructor
    :return: a :class:`~gain.ConstructorDescriptor` of the selected
        constructor
    """
    selected = None  # type: typing.Optional[ConstructorDescriptor]
    for candidate in iter_constructors(cls):
        if selected is None or len(candidate) > len(selected):
            selected = candidate

    if selected is None:
        raise NoConstructorFoundError(fullname(cls))
    logger.debug('Selected constructor %s for %s', selected, fullname(cls))
    return selected
