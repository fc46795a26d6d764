import dataclasses
import functools
import types
import typing

import gain._immutable as immutable
from gain._marker import empty
from gain._utils import resolve_annotations, typename


class MemberReference(immutable.Immutable):
    """
    An immutable reference to a single readable member (a property or a field)
    of a type.

    :param name: the name the member is read by
    :param type: the declared type of the member, or :class:`~gain.empty` if
        the member isn't annotated
    """
    __slots__ = ('name', 'type')

    def __init__(self, name: str, type: typing.Any = empty) -> None:
        # pylint: disable=W0622, redefined-builtin
        super().__init__(name=name, type=empty.ccoerce(type))

    def __str__(self) -> str:
        if self.type is empty:
            return self.name
        return '{}: {}'.format(self.name, typename(self.type))

    def __repr__(self) -> str:
        return '<{} {}>'.format(type(self).__name__, self)


def _is_classvar(annotation: typing.Any) -> bool:
    return annotation is typing.ClassVar or \
        typing.get_origin(annotation) is typing.ClassVar


def _field_names(
        cls: type,
        hints: typing.Mapping[str, typing.Any],
    ) -> typing.List[str]:
    """
    Collect the names of the instance fields a type declares: dataclass
    fields, named tuple fields and (non-``ClassVar``) class annotations.
    """
    names = []
    if dataclasses.is_dataclass(cls):
        names.extend(f.name for f in dataclasses.fields(cls))
    if issubclass(cls, tuple) and hasattr(cls, '_fields'):
        names.extend(cls._fields)
    names.extend(
        name for name, hint in hints.items()
        if not _is_classvar(hint)
        and not isinstance(hint, dataclasses.InitVar)
        and hint is not dataclasses.InitVar
    )
    return list(dict.fromkeys(names))


def _return_type(func: typing.Callable[..., typing.Any]) -> typing.Any:
    return resolve_annotations(func).get('return', empty)


def _shadows(attr: typing.Any) -> bool:
    """
    Methods, ``classmethod``, ``staticmethod`` and other descriptors hide a
    same-named member; plain class-level data values don't.
    """
    return callable(attr) or hasattr(type(attr), '__get__')


def readable_members(
        cls: type,
        specimen: typing.Any = None,
    ) -> typing.Iterator[MemberReference]:
    """
    Iterate over the public (i.e. not underscore-prefixed) members that can be
    read off instances of a type.

    Members are produced in this order, and only once per name:

    #. properties (and :func:`functools.cached_property`) with a getter, and \
    ``__slots__`` members, walking the MRO from the most derived class
    #. declared fields: dataclass fields, named tuple fields and class \
    annotations that aren't ``ClassVar``
    #. attributes stored on :paramref:`.readable_members.specimen`, if \
    provided

    A public method or descriptor shadows a same-named member declared by a
    base class. A plain class-level value (e.g. ``currency = 'USD'``) is a
    default, and doesn't hide the specimen's attribute of the same name.

    :param cls: the type whose members are enumerated
    :param specimen: an instance of :paramref:`.readable_members.cls` whose
        instance attributes are reported as fields
    :return: an iterator of :class:`~gain.MemberReference`
    """
    hints = resolve_annotations(cls)
    fields = _field_names(cls, hints)
    seen = set()  # type: typing.Set[str]

    for base in cls.__mro__:
        if base is object:
            continue
        for name, attr in vars(base).items():
            if name.startswith('_') or name in seen:
                continue
            if isinstance(attr, property):
                member = MemberReference(name, _return_type(attr.fget)) \
                    if attr.fget is not None \
                    else None
            elif isinstance(attr, functools.cached_property):
                member = MemberReference(name, _return_type(attr.func))
            elif isinstance(attr, types.MemberDescriptorType):
                member = MemberReference(name, hints.get(name, empty))
            elif name in fields or not _shadows(attr):
                # a default value; produced below or from the specimen
                continue
            else:
                member = None
            seen.add(name)
            if member is not None:
                yield member

    for name in fields:
        if name.startswith('_') or name in seen:
            continue
        seen.add(name)
        yield MemberReference(name, hints.get(name, empty))

    if specimen is not None:
        for name in getattr(specimen, '__dict__', {}):
            if name.startswith('_') or name in seen:
                continue
            seen.add(name)
            yield MemberReference(name, hints.get(name, empty))


def find_member(
        cls: type,
        name: str,
        specimen: typing.Any = None,
        *,
        ignore_case: bool = True
    ) -> typing.Optional[MemberReference]:
    """
    Find a readable member of a type by name.

    When looking up case-insensitively and several members fold to the same
    name, the member whose name matches exactly is preferred; otherwise the
    first one produced by :func:`~gain.readable_members` wins.

    :param cls: the type to search
    :param name: the name of the member
    :param specimen: an instance of :paramref:`.find_member.cls` whose
        instance attributes are considered, too
    :param ignore_case: whether names are compared case-insensitively
    :return: the :class:`~gain.MemberReference`, or ``None`` if no such member
        exists
    """
    if not ignore_case:
        return next(
            (m for m in readable_members(cls, specimen) if m.name == name),
            None,
        )

    folded = name.casefold()
    candidates = [
        member for member in readable_members(cls, specimen)
        if member.name.casefold() == folded
    ]
    for member in candidates:
        if member.name == name:
            return member
    return candidates[0] if candidates else None
