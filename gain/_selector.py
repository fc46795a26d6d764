import functools
import types
import typing

from gain._exceptions import InvalidUsageError
from gain._members import MemberReference, find_member
from gain._utils import fullname

_INVALID_USAGE = \
    'Must supply a property or field accessor to the change function'


class _Read:
    """
    The token a :class:`~gain._selector._Probe` hands out for an attribute
    read. Supports no operations, so any further use of it fails.
    """
    __slots__ = ('name',)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return '<{} {}>'.format(type(self).__name__, self.name)


class _Probe:
    """
    A stand-in for the instance an accessor reads from. Records every
    attribute read and returns a :class:`~gain._selector._Read` token for it.
    """
    __slots__ = ('_reads',)

    def __init__(self) -> None:
        object.__setattr__(self, '_reads', [])

    def __getattribute__(self, name: str) -> _Read:
        read = _Read(name)
        object.__getattribute__(self, '_reads').append(read)
        return read

    def __setattr__(self, name: str, value: typing.Any) -> None:
        raise InvalidUsageError(_INVALID_USAGE)

    @staticmethod
    def reads(probe: '_Probe') -> typing.List[_Read]:
        return object.__getattribute__(probe, '_reads')


def _name_from_callable(accessor: typing.Callable[[typing.Any], typing.Any]) -> str:
    probe = _Probe()
    try:
        result = accessor(probe)
    except (TypeError, AttributeError) as exc:
        raise InvalidUsageError(_INVALID_USAGE) from exc

    reads = _Probe.reads(probe)
    if len(reads) != 1 or result is not reads[0]:
        raise InvalidUsageError(_INVALID_USAGE)
    return reads[0].name


def _name_from_descriptor(cls: type, accessor: typing.Any) -> str:
    if isinstance(accessor, types.MemberDescriptorType):
        if accessor.__objclass__ in cls.__mro__:
            return accessor.__name__
    else:
        for base in cls.__mro__:
            for name, attr in vars(base).items():
                if attr is accessor:
                    return name
    raise InvalidUsageError(
        '{!r} is not a member of {}'.format(accessor, fullname(cls))
    )


def extract_member_name(cls: type, accessor: typing.Any) -> str:
    """
    Extract the name of the member an accessor reads, without reading from a
    real instance.

    Supported accessors:

    - a one-argument callable that reads a single attribute directly off its
      argument, e.g. ``lambda p: p.price`` or ``operator.attrgetter('price')``
    - the name of the member, e.g. ``'price'``
    - a class-level descriptor, e.g. ``Product.price`` for a property or a
      ``__slots__`` member

    :param cls: the type the accessor reads from
    :param accessor: the accessor
    :raises InvalidUsageError: if the accessor does anything but read exactly
        one attribute directly off its argument
    :return: the name of the member read by the accessor
    """
    if isinstance(accessor, str):
        if not accessor.isidentifier():
            raise InvalidUsageError(_INVALID_USAGE)
        return accessor
    if isinstance(accessor, (
            property,
            functools.cached_property,
            types.MemberDescriptorType,
        )):
        return _name_from_descriptor(cls, accessor)
    if callable(accessor) and not isinstance(accessor, type):
        return _name_from_callable(accessor)
    raise InvalidUsageError(_INVALID_USAGE)


def select_member(
        cls: type,
        accessor: typing.Any,
        specimen: typing.Any = None,
    ) -> MemberReference:
    """
    Select the single readable member of a type that an accessor denotes.

    :param cls: the type the accessor reads from
    :param accessor: see :func:`~gain._selector.extract_member_name`
    :param specimen: an instance of :paramref:`.select_member.cls` whose
        instance attributes count as fields
    :raises InvalidUsageError: if the accessor isn't a direct member read, or
        the member it reads is neither a property nor a field
    :return: a :class:`~gain.MemberReference` for the member
    """
    name = extract_member_name(cls, accessor)
    member = find_member(cls, name, specimen, ignore_case=False)
    if member is None:
        raise InvalidUsageError(
            "'{}' is not a property or field of {}".format(name, fullname(cls))
        )
    return member
