import logging
import threading
import typing

import gain._immutable as immutable
from gain._plan import RebuildPlan
from gain._utils import fullname

logger = logging.getLogger(__name__)


class PlanKey(immutable.Immutable):
    """
    An immutable key of the :class:`~gain.PlanCache`: a type and the
    (case-sensitive) name of the member being replaced.

    Keys compare by type identity, so distinct classes sharing a qualified
    name (e.g. classes defined inside a function) never share a plan.
    ``str(key)`` renders ``'<module>.<qualname>:<member>'``.

    :param cls: the type being rebuilt
    :param member_name: the name of the member being replaced
    """
    __slots__ = ('cls', 'member_name')

    def __init__(self, cls: type, member_name: str) -> None:
        super().__init__(cls=cls, member_name=member_name)

    def __str__(self) -> str:
        return '{}:{}'.format(fullname(self.cls), self.member_name)

    def __repr__(self) -> str:
        return '<{} {}>'.format(type(self).__name__, self)


class PlanCache:
    """
    A thread-safe store of :class:`~gain.RebuildPlan` instances keyed by
    :class:`~gain.PlanKey`.

    Entries are only ever added: there is no eviction, expiry or removal, so
    the cache holds one plan per distinct ``(type, member)`` pair ever
    requested.

    Reads don't lock. When several threads miss on the same key at once,
    each runs the factory, and the first plan to be published is the one
    every one of them returns.
    """

    def __init__(self) -> None:
        self._plans = {}  # type: typing.Dict[PlanKey, RebuildPlan]
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return '<{} ({} plans)>'.format(type(self).__name__, len(self))

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, key: typing.Any) -> bool:
        return key in self._plans

    def get(
            self,
            key: PlanKey,
            default: typing.Optional[RebuildPlan] = None,
        ) -> typing.Optional[RebuildPlan]:
        """
        Get the published plan for a key without creating it.
        """
        return self._plans.get(key, default)

    def get_or_create(
            self,
            key: PlanKey,
            factory: typing.Callable[[], RebuildPlan],
        ) -> RebuildPlan:
        """
        Get the plan for a key, creating and publishing it with ``factory`` on
        first use.

        The factory runs outside the lock; if it raises, nothing is published
        and the error propagates to the caller.

        :param key: the :class:`~gain.PlanKey` of the plan
        :param factory: a callable that compiles the plan
        :return: the published :class:`~gain.RebuildPlan` for
            :paramref:`.PlanCache.get_or_create.key`
        """
        plan = self._plans.get(key)
        if plan is not None:
            return plan

        logger.debug('Rebuild plan cache miss for %s', key)
        candidate = factory()
        with self._lock:
            plan = self._plans.setdefault(key, candidate)

        if plan is candidate:
            logger.debug('Published rebuild plan for %s', key)
        else:
            logger.debug(
                'Discarded rebuild plan for %s; another caller published first',
                key,
            )
        return plan


_plan_cache = PlanCache()


def get_plan_cache() -> PlanCache:
    """
    Return the process-wide :class:`~gain.PlanCache` used by
    :func:`~gain.change`.
    """
    return _plan_cache
