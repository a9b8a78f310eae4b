"""Route Resolver: pure exact-match lookup of an inbound (method, path) against triggers.

Invariants:
    - Match is exact on both method and path: no case folding, no trailing-slash stripping
    - Several matches resolve to the first in input order (stable, deterministic)
    - No match returns None; mapping to a 404 is the caller's job
    - No IO, no state: the trigger snapshot is passed in on every call

Design Decisions:
    - Degrade instead of fail on duplicate bindings: uniqueness is enforced by the registry,
      find_route_conflicts() exists so the shell can log the data-quality issue
    - TriggerLike Protocol: core stays free of pydantic schemas (ADR: core never imports shell)
"""

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar


class TriggerLike(Protocol):
    """Structural contract for anything that binds (method, path) to a function."""
    name: str
    method: str
    path: str
    function_name: str


TTrigger = TypeVar("TTrigger", bound=TriggerLike)


def matches(trigger: TriggerLike, method: str, path: str) -> bool:
    """Exact-match predicate over the trigger's (method, path)."""
    return trigger.method == method and trigger.path == path


def resolve(triggers: Iterable[TTrigger], method: str, path: str) -> TTrigger | None:
    """Return the first trigger bound to (method, path), or None."""
    for trigger in triggers:
        if matches(trigger, method, path):
            return trigger
    return None


def find_route_conflicts(
    triggers: Sequence[TriggerLike],
) -> dict[tuple[str, str], list[str]]:
    """Map each (method, path) bound by more than one trigger to the trigger names.

    Names are listed in input order, so the first name is the one resolve() picks.
    """
    bindings: dict[tuple[str, str], list[str]] = {}
    for trigger in triggers:
        bindings.setdefault((trigger.method, trigger.path), []).append(trigger.name)
    return {key: names for key, names in bindings.items() if len(names) > 1}


def triggers_for_function(triggers: Iterable[TTrigger], function_name: str) -> list[TTrigger]:
    """All triggers targeting function_name, in input order."""
    return [t for t in triggers if t.function_name == function_name]
