class GainError(Exception):
    """
    A common base class for ``gain`` exceptions
    """
    pass


class ImmutableInstanceError(GainError, AttributeError):
    """
    An error that is raised when trying to set an attribute on a
    :class:`~gain._immutable.Immutable` instance.
    """
    pass


class InvalidUsageError(GainError, TypeError):
    """
    An error that is raised when an accessor doesn't denote a single, direct
    read of a property or field.
    """
    pass


class NoConstructorFoundError(GainError):
    """
    An error that is raised when a type offers no public constructor to
    rebuild its instances with.

    :param type_name: the full name of the offending type
    """
    def __init__(self, type_name: str) -> None:
        super().__init__(
            'Type {} does not provide any public constructor'.format(type_name)
        )
        self.type_name = type_name


class MissingSourceMemberError(GainError):
    """
    An error that is raised when a constructor parameter has no readable
    member of the same name to source its argument from.

    :param parameter_name: the name of the unmatched constructor parameter
    :param type_name: the full name of the type being rebuilt
    """
    def __init__(self, parameter_name: str, type_name: str) -> None:
        super().__init__(
            'No matching property found for constructor argument {} '
            'on type {}'.format(parameter_name, type_name)
        )
        self.parameter_name = parameter_name
        self.type_name = type_name


class ConversionError(GainError, TypeError):
    """
    An error that is raised when a value (or a declared type) can't be
    converted to the type of the constructor parameter it feeds.
    """
    pass
