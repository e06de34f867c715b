"""Composable predicates over a single reflected member.

Predicates are plain functions taking a `Member` and returning a bool. Combine them with `every`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from legacywire.members import Member

MemberPredicate = Callable[["Member"], bool]

GETTERS = re.compile(r"get(?:[A-Z]|_[A-Za-z]).+")
CONSTANTS = re.compile(r"[A-Z][A-Z0-9_]+")


def every(*predicates: MemberPredicate) -> MemberPredicate:
    """Combine predicates with a logical and.

    Predicates are evaluated left to right and evaluation stops at the first one returning false.
    """

    def _every(member: Member) -> bool:
        return all(predicate(member) for predicate in predicates)

    return _every


def anything(_member: Member) -> bool:
    return True


def visible(member: Member) -> bool:
    """Accept members which are not private, i.e. whose name does not start with an underscore."""
    return not member.name.startswith("_")


def declared_on_examined_type(member: Member) -> bool:
    """Accept only members declared by the class being examined, rejecting inherited ones."""
    return member.declaring_type is member.examined_type


def static(member: Member) -> bool:
    return member.is_static


def takes_no_arguments(member: Member) -> bool:
    """Accept members which can be called without arguments. Fields always qualify."""
    return member.parameter_count == 0


def named(*names: str) -> MemberPredicate:
    """Accept members whose name is exactly one of names."""
    allowed = frozenset(names)

    def _named(member: Member) -> bool:
        return member.name in allowed

    return _named


def named_matching(pattern: str | re.Pattern[str]) -> MemberPredicate:
    """Accept members whose full name matches pattern."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def _named_matching(member: Member) -> bool:
        return compiled.fullmatch(member.name) is not None

    return _named_matching


def is_getter_like(member: Member) -> bool:
    """Accept methods named like `getInstance` or `get_instance` which take no arguments."""
    return member.kind == "method" and member.parameter_count == 0 and GETTERS.fullmatch(member.name) is not None


def is_constant_like(member: Member) -> bool:
    """Accept members named like constants, e.g. `INSTANCE` or `DEFAULT_CLIENT`."""
    return CONSTANTS.fullmatch(member.name) is not None


any_getter = is_getter_like
and_constant = is_constant_like
