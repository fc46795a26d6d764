import pytest

import gain


@pytest.fixture
def reset_check_new_values():
    """
    Helper fixture that resets the state of ``check_new_values`` to its value
    before the test was run.
    """
    # pylint: disable=W0212, protected-access
    prerun = gain._config._check_new_values
    yield
    gain._config._check_new_values = prerun


@pytest.fixture
def plan_cache(monkeypatch):
    """
    Helper fixture that swaps in an empty process-wide ``PlanCache`` for the
    duration of the test.
    """
    # pylint: disable=W0212, protected-access
    cache = gain.PlanCache()
    monkeypatch.setattr(gain._cache, '_plan_cache', cache)
    return cache
