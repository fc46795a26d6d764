_check_new_values = False


def get_check_new_values() -> bool:
    """
    Return whether caller-supplied new values are type-checked against the
    constructor parameter they feed.
    """
    return _check_new_values


def set_check_new_values(check: bool) -> None:
    """
    Set whether caller-supplied new values are type-checked against the
    constructor parameter they feed. By default, they are not.
    """
    # pylint: disable=W0603, global-statement
    if not isinstance(check, bool):
        raise TypeError("'check' must be bool.")
    global _check_new_values
    _check_new_values = check
