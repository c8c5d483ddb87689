from typing import NamedTuple
from enum import Enum
import resource


class LimitType(Enum):
	Files = resource.RLIMIT_NOFILE


REASONABLE_LIMITS: dict[LimitType, int] = {
	# Each connection is a file descriptor, and so is each file being served
	LimitType.Files: 10 * 10240,
}


class Limit(NamedTuple):
	type: LimitType
	soft: int
	hard: int


def limit(scope: LimitType) -> Limit:
	return Limit(scope, *resource.getrlimit(scope.value))


def unlimit(scope: LimitType, *, maximum: int | None = 0) -> int | bool:
	"""Raises the soft limit for the given scope up to the hard limit (capped
	to `maximum`), returns the new limit or `False` if it couldn't be changed."""
	lm = limit(scope)
	if lm.soft == resource.RLIM_INFINITY:
		return lm.soft
	# We apply reasonable limits, as for instance Darwin has really high
	# limits that will lead to OverflowErrors.
	maximum = REASONABLE_LIMITS.get(scope) if maximum == 0 else maximum
	target: int = lm.hard if maximum is None else maximum
	if lm.hard != resource.RLIM_INFINITY:
		target = min(target, lm.hard)
	if target <= lm.soft:
		return lm.soft
	try:
		resource.setrlimit(scope.value, (target, lm.hard))
		return target
	except ValueError:
		return False
	except OSError:
		return False


# EOF
