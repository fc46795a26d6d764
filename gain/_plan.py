import logging
import typing

from gain._config import get_check_new_values
from gain._constructor import KEYWORD_ONLY, ConstructorDescriptor
from gain._conversion import Conversion, get_conversion
from gain._exceptions import ConversionError, MissingSourceMemberError
import gain._immutable as immutable
from gain._members import MemberReference, find_member
from gain._utils import fullname, typename

logger = logging.getLogger(__name__)


class TakeNewValue(immutable.Immutable):
    """
    A value source that supplies the caller's new value, converted to the type
    of the constructor parameter it feeds.

    :param conversion: the :class:`~gain.Conversion` applied to the new value
    """
    __slots__ = ('conversion',)

    def __init__(self, conversion: Conversion) -> None:
        super().__init__(conversion=conversion)

    def __repr__(self) -> str:
        return '<{} {!r}>'.format(type(self).__name__, self.conversion)

    def __call__(self, original: typing.Any, new_value: typing.Any) -> typing.Any:
        # pylint: disable=W0613, unused-argument
        value = self.conversion(new_value)
        if get_check_new_values() and not self.conversion.accepts(value):
            raise ConversionError(
                'Cannot convert new value {!r} to {!r}'.\
                format(new_value, self.conversion)
            )
        return value


class ReadMember(immutable.Immutable):
    """
    A value source that reads a member off the original instance, converted to
    the type of the constructor parameter it feeds.

    :param name: the name of the member to read
    :param conversion: the :class:`~gain.Conversion` applied to the member's
        value
    """
    __slots__ = ('name', 'conversion')

    def __init__(self, name: str, conversion: Conversion) -> None:
        super().__init__(name=name, conversion=conversion)

    def __repr__(self) -> str:
        return '<{} {} {!r}>'.format(
            type(self).__name__,
            self.name,
            self.conversion,
        )

    def __call__(self, original: typing.Any, new_value: typing.Any) -> typing.Any:
        # pylint: disable=W0613, unused-argument
        return self.conversion(getattr(original, self.name))


TValueSource = typing.Union[TakeNewValue, ReadMember]


class RebuildPlan(immutable.Immutable):
    """
    An immutable, reusable recipe for rebuilding an instance of a type with
    one member replaced. Calling the plan with the original instance and the
    new value calls the selected constructor with one argument per parameter,
    each produced by that parameter's value source.

    Only what the constructor parameters require is read off the original;
    members that no parameter feeds end up with whatever the constructor
    gives them.

    :param cls: the type the plan rebuilds
    :param member_name: the name of the member the plan replaces
    :param constructor: the :class:`~gain.ConstructorDescriptor` to call
    :param sources: one value source per parameter of
        :paramref:`.RebuildPlan.constructor`, in the same order
    """
    __slots__ = ('cls', 'member_name', 'constructor', 'sources')

    def __init__(
            self,
            cls: type,
            member_name: str,
            constructor: ConstructorDescriptor,
            sources: typing.Iterable[TValueSource]
        ) -> None:
        sources = tuple(sources)
        if len(sources) != len(constructor.parameters):
            raise ValueError(
                'Expected {} value sources for {}, received {}'.format(
                    len(constructor.parameters),
                    constructor,
                    len(sources),
                )
            )
        super().__init__(
            cls=cls,
            member_name=member_name,
            constructor=constructor,
            sources=sources,
        )

    def __repr__(self) -> str:
        return '<{} {}:{} => {}>'.format(
            type(self).__name__,
            fullname(self.cls),
            self.member_name,
            self.constructor,
        )

    def __call__(self, original: typing.Any, new_value: typing.Any) -> typing.Any:
        args = []
        kwargs = {}
        for param, source in zip(self.constructor.parameters, self.sources):
            value = source(original, new_value)
            if param.kind is KEYWORD_ONLY:
                kwargs[param.name] = value
            else:
                args.append(value)
        return self.constructor.callable(*args, **kwargs)


def _get_conversion(
        cls: type,
        member: MemberReference,
        parameter_name: str,
        parameter_type: typing.Any,
    ) -> Conversion:
    try:
        return get_conversion(member.type, parameter_type)
    except ConversionError as exc:
        raise ConversionError(
            "Cannot convert member '{member}' ({source}) to constructor "
            "argument '{param}' ({target}) on type {type_name}".format(
                member=member.name,
                source=typename(member.type),
                param=parameter_name,
                target=typename(parameter_type),
                type_name=fullname(cls),
            )
        ) from exc


def compile_plan(
        cls: type,
        member: MemberReference,
        constructor: ConstructorDescriptor,
        specimen: typing.Any = None,
    ) -> RebuildPlan:
    """
    Compile the :class:`~gain.RebuildPlan` that replaces ``member`` on
    instances of ``cls`` by calling ``constructor``.

    For each constructor parameter, in declaration order:

    #. if its name matches the member's name (case-insensitively), the new \
    value is taken, converted to the parameter's type
    #. otherwise, the readable member of the same name (case-insensitively) \
    is read off the original, converted to the parameter's type
    #. otherwise, compilation fails

    Type compatibility of every argument is checked here, not when the plan
    is called.

    :param cls: the type to rebuild
    :param member: the member to replace
    :param constructor: the constructor to rebuild with
    :param specimen: an instance of :paramref:`.compile_plan.cls` whose
        instance attributes count as fields
    :raises MissingSourceMemberError: if a parameter has no readable member
        of the same name
    :raises ConversionError: if a member's declared type doesn't convert to
        its parameter's declared type
    :return: the compiled :class:`~gain.RebuildPlan`
    """
    folded = member.name.casefold()
    sources = []  # type: typing.List[TValueSource]
    for param in constructor.parameters:
        if param.name.casefold() == folded:
            sources.append(TakeNewValue(
                _get_conversion(cls, member, param.name, param.type)
            ))
            continue

        source = find_member(cls, param.name, specimen)
        if source is None:
            raise MissingSourceMemberError(param.name, fullname(cls))
        sources.append(ReadMember(
            source.name,
            _get_conversion(cls, source, param.name, param.type),
        ))

    if not any(isinstance(source, TakeNewValue) for source in sources):
        logger.warning(
            "No argument of %s receives member '%s' of %s; "
            "the new value will be ignored",
            constructor,
            member.name,
            fullname(cls),
        )

    plan = RebuildPlan(cls, member.name, constructor, sources)
    logger.debug('Compiled %r', plan)
    return plan
