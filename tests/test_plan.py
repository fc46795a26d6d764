import logging
from decimal import Decimal

import pytest

from gain._config import set_check_new_values
from gain._constructor import (
    KEYWORD_ONLY,
    POSITIONAL_ONLY,
    ConstructorDescriptor,
    ParameterDescriptor,
    find_constructor,
)
from gain._conversion import Conversion
from gain._exceptions import ConversionError, MissingSourceMemberError
from gain._members import MemberReference
from gain._plan import ReadMember, RebuildPlan, TakeNewValue, compile_plan

# pylint: disable=C0103, invalid-name
# pylint: disable=R0201, no-self-use
# pylint: disable=W0622, redefined-builtin


class Product:
    def __init__(self, id: int, name: str, price: Decimal) -> None:
        self.id = id
        self.name = name
        self.price = price


@pytest.mark.usefixtures('reset_check_new_values')
class TestTakeNewValue:
    def test__call__(self):
        """
        Ensure the new value is converted, and the original ignored.
        """
        source = TakeNewValue(Conversion((float,)))
        assert source(object(), 2) == 2.0

    def test_check_new_values(self):
        """
        Ensure values that don't convert raise only when checking is enabled.
        """
        source = TakeNewValue(Conversion((int,)))
        assert source(None, 'a') == 'a'

        set_check_new_values(True)
        with pytest.raises(ConversionError) as excinfo:
            source(None, 'a')
        assert excinfo.value.args[0] == \
            "Cannot convert new value 'a' to <Conversion int>"


class TestReadMember:
    def test__call__(self):
        """
        Ensure the member is read off the original and converted.
        """
        source = ReadMember('id', Conversion((Decimal,)))
        assert source(Product(3, 'a', Decimal(1)), None) == Decimal(3)


class TestRebuildPlan:
    def test_source_count_mismatch(self):
        """
        Ensure every parameter requires a value source.
        """
        ctor = ConstructorDescriptor.from_callable(Product)
        with pytest.raises(ValueError):
            RebuildPlan(Product, 'id', ctor, [TakeNewValue(Conversion())])

    def test_parameter_kinds(self):
        """
        Ensure keyword-only parameters are passed by keyword and the others
        positionally.
        """
        calls = []
        def factory(*args, **kwargs):
            calls.append((args, kwargs))

        ctor = ConstructorDescriptor(factory, 'factory', [
            ParameterDescriptor('a', POSITIONAL_ONLY),
            ParameterDescriptor('b'),
            ParameterDescriptor('c', KEYWORD_ONLY),
        ])
        plan = RebuildPlan(object, 'b', ctor, [
            ReadMember('real', Conversion()),
            TakeNewValue(Conversion()),
            ReadMember('imag', Conversion()),
        ])
        plan(complex(1, 2), 'new')
        assert calls == [((1.0, 'new'), {'c': 2.0})]

    def test__repr__(self):
        """
        Ensure the repr names the key and the constructor.
        """
        plan = compile_plan(
            Product,
            MemberReference('price', Decimal),
            find_constructor(Product),
            Product(1, 'a', Decimal(1)),
        )
        assert repr(plan) == (
            '<RebuildPlan {module}.Product:price => '
            'Product(id: int, name: str, price: decimal.Decimal)>'
        ).format(module=__name__)


class TestCompilePlan:
    def test_sources(self):
        """
        Ensure the matching parameter takes the new value and the others read
        their same-named members.
        """
        specimen = Product(1, 'a', Decimal(1))
        plan = compile_plan(
            Product,
            MemberReference('price'),
            find_constructor(Product),
            specimen,
        )
        assert plan.sources == (
            ReadMember('id', Conversion((int,))),
            ReadMember('name', Conversion((str,))),
            TakeNewValue(Conversion((Decimal,))),
        )
        rebuilt = plan(specimen, Decimal(2))
        assert (rebuilt.id, rebuilt.name, rebuilt.price) == (1, 'a', Decimal(2))

    def test_case_insensitive(self):
        """
        Ensure parameters match members regardless of case.
        """
        class Klass:
            def __init__(self, Id, NAME):
                self._id = Id
                self._name = NAME

            @property
            def id(self):
                return self._id

            @property
            def name(self):
                return self._name

        plan = compile_plan(
            Klass, MemberReference('name'), find_constructor(Klass),
        )
        assert plan.sources == (
            ReadMember('id', Conversion()),
            TakeNewValue(Conversion()),
        )
        assert plan(Klass(1, 'a'), 'b').name == 'b'

    def test_missing_source_member(self):
        """
        Ensure a parameter without a same-named member fails compilation.
        """
        class Tag:
            def __init__(self, id, name, count):
                self.id = id
                self.name = name
                self._count = count

        with pytest.raises(MissingSourceMemberError) as excinfo:
            compile_plan(
                Tag,
                MemberReference('name'),
                find_constructor(Tag),
                Tag(1, 'General', 3),
            )
        assert excinfo.value.parameter_name == 'count'
        assert excinfo.value.type_name == \
            '{}.{}'.format(__name__, Tag.__qualname__)
        assert excinfo.value.args[0] == \
            'No matching property found for constructor argument count ' \
            'on type {}'.format(excinfo.value.type_name)

    def test_widening_member(self):
        """
        Ensure a narrower member type feeds a wider parameter type.
        """
        class Reading:
            def __init__(self, value: float, label: str) -> None:
                self._value = int(value)
                self.label = label

            @property
            def value(self) -> int:
                return self._value

        plan = compile_plan(
            Reading,
            MemberReference('label', str),
            find_constructor(Reading),
        )
        assert plan.sources[0] == ReadMember('value', Conversion((float,)))

    def test_incompatible_member(self):
        """
        Ensure an incompatible member type fails compilation, naming the
        member, parameter and type.
        """
        class Reading:
            def __init__(self, value: int, label: str) -> None:
                self._value = value
                self.label = label

            @property
            def value(self) -> str:
                return str(self._value)

        with pytest.raises(ConversionError) as excinfo:
            compile_plan(
                Reading,
                MemberReference('label', str),
                find_constructor(Reading),
            )
        assert excinfo.value.args[0] == (
            "Cannot convert member 'value' (str) to constructor argument "
            "'value' (int) on type {}.{}"
        ).format(__name__, Reading.__qualname__)

    def test_incompatible_new_value_type(self):
        """
        Ensure the declared type of the member being replaced is checked
        against its parameter, too.
        """
        with pytest.raises(ConversionError):
            compile_plan(
                Product,
                MemberReference('price', str),
                find_constructor(Product),
                Product(1, 'a', Decimal(1)),
            )

    def test_unmatched_member_warns(self, caplog):
        """
        Ensure a plan whose constructor doesn't take the member logs a warning
        and ignores the new value.
        """
        class Category:
            def __init__(self, id, name):
                self.id = id
                self.name = name
                self.product_count = 0

        specimen = Category(1, 'Electronics')
        with caplog.at_level(logging.WARNING, logger='gain._plan'):
            plan = compile_plan(
                Category,
                MemberReference('product_count'),
                find_constructor(Category),
                specimen,
            )
        assert 'the new value will be ignored' in caplog.text
        rebuilt = plan(specimen, 5)
        assert rebuilt is not specimen
        assert rebuilt.product_count == 0
