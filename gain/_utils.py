import inspect
import typing

from gain._marker import empty


def fullname(cls: type) -> str:
    """
    Build the full, dotted name of a type, e.g. ``'shop.models.Product'``.
    Builtins are rendered without their module.

    :param cls: the type to name
    :return: the ``__module__`` and ``__qualname__`` of
        :paramref:`.fullname.cls` joined by a dot
    """
    module = getattr(cls, '__module__', None)
    qualname = getattr(cls, '__qualname__', getattr(cls, '__name__', repr(cls)))
    if not module or module == 'builtins':
        return qualname
    return '{}.{}'.format(module, qualname)


def typename(annotation: typing.Any) -> str:
    """
    Build a short string representation of a type annotation for messages.
    """
    if annotation is empty:
        return repr(empty)
    if isinstance(annotation, type):
        return fullname(annotation)
    return str(annotation)


def resolve_annotations(obj: typing.Any) -> typing.Dict[str, typing.Any]:
    """
    Resolve the annotations of a class or callable, evaluating postponed
    (string) annotations where possible.

    Annotations that can't be evaluated (e.g. forward references to local
    classes) are reported as :class:`~gain.empty` rather than raising.

    :param obj: a class, function or method
    :return: a mapping of names to resolved annotations
    """
    try:
        return typing.get_type_hints(obj)
    except (NameError, AttributeError, TypeError, SyntaxError):
        pass

    raw = {}
    for base in reversed(obj.__mro__) if isinstance(obj, type) else [obj]:
        try:
            raw.update(inspect.get_annotations(base))
        except NameError:
            continue
    return {
        k: empty if isinstance(v, str) else empty.ccoerce(v)
        for k, v in raw.items()
    }


def introspect_signature(
        callable: typing.Callable[..., typing.Any],
    ) -> inspect.Signature:
    """
    Get the :class:`inspect.Signature` of a callable, evaluating postponed
    (string) annotations where possible. Annotations that can't be evaluated
    are replaced by :class:`inspect.Parameter.empty`.

    :param callable: a class or callable
    :raises ValueError: if no signature can be provided
    :raises TypeError: if the object isn't supported by :mod:`inspect`
    :return: the signature of :paramref:`.introspect_signature.callable`
    """
    # pylint: disable=W0622, redefined-builtin
    try:
        return inspect.signature(callable, eval_str=True)
    except (NameError, AttributeError, SyntaxError):
        pass

    sig = inspect.signature(callable)
    return sig.replace(parameters=[
        param.replace(annotation=empty.native)
        if isinstance(param.annotation, str)
        else param
        for param in sig.parameters.values()
    ])
