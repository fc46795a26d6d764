from ._cache import (
    PlanCache,
    PlanKey,
    get_plan_cache,
)
from ._change import (
    Changeable,
    change,
)
from ._config import (
    get_check_new_values,
    set_check_new_values,
)
from ._constructor import (
    ConstructorDescriptor,
    ParameterDescriptor,
    constructor,
    find_constructor,
)
from ._conversion import (
    Conversion,
    get_conversion,
)
from ._exceptions import (
    ConversionError,
    GainError,
    ImmutableInstanceError,
    InvalidUsageError,
    MissingSourceMemberError,
    NoConstructorFoundError,
)
from ._marker import empty
from ._members import (
    MemberReference,
    find_member,
    readable_members,
)
from ._plan import (
    ReadMember,
    RebuildPlan,
    TakeNewValue,
    compile_plan,
)
from ._selector import select_member
