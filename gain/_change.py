import typing

from gain._cache import PlanKey, get_plan_cache
from gain._constructor import find_constructor
from gain._plan import compile_plan
from gain._selector import select_member

T = typing.TypeVar('T')


def change(original: T, accessor: typing.Any, new_value: typing.Any) -> T:
    """
    Return a new instance of ``type(original)`` identical to ``original``
    except for one member, which is replaced with ``new_value``.

    The new instance is built with the type's most complete public
    constructor, fed with the new value and with the same-named members of
    ``original``. The recipe for doing so is compiled once per type and
    member, and reused from then on.

    Usage:

    .. testcode::

        from decimal import Decimal
        import gain

        class Product:
            def __init__(self, id: int, name: str, price: Decimal):
                self.id = id
                self.name = name
                self.price = price

        p1 = Product(1, 'iPod', Decimal('149.99'))
        p2 = gain.change(p1, lambda p: p.price, Decimal('299.99'))
        assert (p2.id, p2.name, p2.price) == (1, 'iPod', Decimal('299.99'))

    :param original: the instance to derive the new instance from
    :param accessor: denotes the member to replace; see
        :func:`~gain.select_member`
    :param new_value: the value of the member on the new instance
    :raises InvalidUsageError: if the accessor doesn't denote a property or a
        field
    :raises NoConstructorFoundError: if the type has no public constructor
    :raises MissingSourceMemberError: if a constructor parameter has no
        readable member of the same name
    :raises ConversionError: if a member can't be converted to the type of its
        constructor parameter
    :return: the new instance
    """
    cls = type(original)
    member = select_member(cls, accessor, original)
    plan = get_plan_cache().get_or_create(
        PlanKey(cls, member.name),
        lambda: compile_plan(cls, member, find_constructor(cls), original),
    )
    return plan(original, new_value)


class Changeable:
    """
    A mixin that offers :func:`~gain.change` as a method.

    Usage::

        class Product(gain.Changeable):
            ...

        p2 = p1.change(lambda p: p.price, Decimal('299.99'))
    """
    __slots__ = ()

    def change(self: T, accessor: typing.Any, new_value: typing.Any) -> T:
        return change(self, accessor, new_value)
