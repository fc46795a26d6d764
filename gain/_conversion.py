import decimal
import fractions
import logging
import types
import typing

from gain._exceptions import ConversionError
import gain._immutable as immutable
from gain._marker import empty
from gain._utils import typename

logger = logging.getLogger(__name__)

# target type -> source types that widen to it without loss
WIDENING = types.MappingProxyType({
    float: (int,),
    complex: (int, float),
    decimal.Decimal: (int,),
    fractions.Fraction: (int,),
})

_UNION_ORIGINS = (typing.Union, types.UnionType)


def normalize_type(
        annotation: typing.Any,
    ) -> typing.Optional[typing.Tuple[type, ...]]:
    """
    Reduce an annotation to the tuple of classes it admits, or ``None`` if the
    annotation admits anything (or isn't understood).

    - ``empty``, ``typing.Any``, ``object``, type variables, ``Literal``
      and string forward references admit anything
    - ``None`` admits :class:`NoneType`
    - ``Optional`` / ``Union`` admit the union of their arms
    - ``Annotated[T, ...]`` admits what ``T`` admits
    - generic aliases admit their origin, e.g. ``List[int]`` admits ``list``

    :param annotation: a type annotation
    :return: a tuple of classes, or ``None``
    """
    if annotation is empty or annotation is typing.Any or annotation is object:
        return None
    if annotation is None:
        return (type(None),)

    origin = typing.get_origin(annotation)
    if origin in _UNION_ORIGINS:
        admitted = []  # type: typing.List[type]
        for arg in typing.get_args(annotation):
            arm = normalize_type(arg)
            if arm is None:
                return None
            admitted.extend(arm)
        return tuple(dict.fromkeys(admitted))
    if origin is typing.Annotated:
        return normalize_type(typing.get_args(annotation)[0])
    if origin is not None:
        annotation = origin

    return (annotation,) if isinstance(annotation, type) else None


def _is_protocol(cls: type) -> bool:
    return typing.Protocol in getattr(cls, '__mro__', ())


def _issubclass(source: type, target: type) -> bool:
    try:
        return issubclass(source, target)
    except TypeError:
        # protocols that aren't runtime checkable admit any class
        if not _is_protocol(target):
            raise
        logger.debug(
            'Skipping subclass check of %s against protocol %s',
            typename(source),
            typename(target),
        )
        return True


def _isinstance(value: typing.Any, targets: typing.Tuple[type, ...]) -> bool:
    try:
        return isinstance(value, targets)
    except TypeError:
        if len(targets) > 1:
            return any(_isinstance(value, (target,)) for target in targets)
        if not _is_protocol(targets[0]):
            raise
        return True


def is_convertible(source: type, target: type) -> bool:
    """
    Checks whether values of the ``source`` class convert to the ``target``
    class by identity (same class or subclass) or by numeric widening.
    """
    return _issubclass(source, target) or \
        any(_issubclass(source, w) for w in WIDENING.get(target, ()))


class Conversion(immutable.Immutable):
    """
    A compiled, immutable conversion of values to the type a constructor
    parameter declares.

    When called, values that are already instances of one of the ``targets``
    are passed through unchanged (so object identity is preserved), values
    that widen to a target (e.g. ``int`` to ``float``) are converted by calling
    the target, and any other value is passed through as-is.

    :param targets: the classes the parameter admits, or ``None`` if it admits
        anything
    """
    __slots__ = ('targets',)

    def __init__(
            self,
            targets: typing.Optional[typing.Iterable[type]] = None
        ) -> None:
        super().__init__(
            targets=tuple(targets) if targets is not None else None,
        )

    def __repr__(self) -> str:
        if self.targets is None:
            return '<{} any>'.format(type(self).__name__)
        return '<{} {}>'.format(
            type(self).__name__,
            ' | '.join(typename(t) for t in self.targets),
        )

    def __call__(self, value: typing.Any) -> typing.Any:
        if self.targets is None or _isinstance(value, self.targets):
            return value
        for target in self.targets:
            if isinstance(value, WIDENING.get(target, ())):
                return target(value)
        return value

    def accepts(self, value: typing.Any) -> bool:
        """
        Checks whether a (converted) value is admitted by the ``targets``.
        """
        return self.targets is None or _isinstance(value, self.targets)


def get_conversion(
        source_type: typing.Any,
        target_type: typing.Any,
    ) -> Conversion:
    """
    Build the :class:`~gain.Conversion` from a declared source type to a
    declared target type, checking their compatibility up front.

    Every class the source admits must convert to some class the target
    admits, by identity or by widening (see :data:`~gain._conversion.WIDENING`).
    If either type is unknown, the check is skipped.

    :param source_type: the declared type of the value, e.g. of a member
    :param target_type: the declared type of the constructor parameter
    :raises ConversionError: if the source type can't be converted
    :return: the :class:`~gain.Conversion` to apply at invocation
    """
    targets = normalize_type(target_type)
    if targets is None:
        return Conversion()

    sources = normalize_type(source_type)
    for source in sources or ():
        if not any(is_convertible(source, target) for target in targets):
            raise ConversionError(
                'Cannot convert {} to {}'.format(
                    typename(source_type),
                    typename(target_type),
                )
            )
    return Conversion(targets)
