import inspect

# pylint: disable=C0103, invalid-name


class MarkerMeta(type):
    """
    Metaclass of sentinel classes. Calling a sentinel hands back the class
    itself, and sentinels are falsy.
    """
    def __call__(cls):
        return cls

    def __repr__(cls) -> str:
        return '<{}>'.format(cls.__name__)

    def __bool__(cls) -> bool:
        return False


class empty(metaclass=MarkerMeta):
    """
    A :class:`~gain._marker.MarkerMeta` class denoting that a member or a
    parameter has no declared type. Used in place of
    :class:`inspect.Parameter.empty`, which isn't repr'd usefully.

    :ivar native: local storage of :class:`inspect.Parameter.empty`
    """
    native = inspect.Parameter.empty

    @classmethod
    def ccoerce(cls, annotation):
        """
        Conditionally coerce an annotation to :class:`~gain.empty`.

        :param annotation: an annotation as found on an
            :class:`inspect.Parameter` or in ``__annotations__``
        :return: the annotation, or :class:`~gain.empty` if the annotation is
            :class:`inspect.Parameter.empty` or ``None``
        """
        return cls if annotation is cls.native or annotation is None \
            else annotation
