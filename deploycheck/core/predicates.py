"""Ready-made validation predicates for the endpoint poller.

A predicate is a pure ``(status_code, body) -> bool`` function. The poller
layers nothing on top of it, so a "200 and contains X" check must be
spelled out here or by the caller.
"""

from __future__ import annotations

from collections.abc import Callable

ValidationPredicate = Callable[[int, str], bool]


def status_is(expected: int) -> ValidationPredicate:
    """Accept responses whose status code equals *expected*."""

    def _check(status_code: int, body: str) -> bool:
        return status_code == expected

    _check.__name__ = f"status_is_{expected}"
    return _check


def body_contains(text: str) -> ValidationPredicate:
    """Accept responses whose body contains *text*."""

    def _check(status_code: int, body: str) -> bool:
        return text in body

    _check.__name__ = "body_contains"
    return _check


def all_of(*predicates: ValidationPredicate) -> ValidationPredicate:
    """Accept when every predicate accepts."""
    if not predicates:
        raise ValueError("all_of() needs at least one predicate")

    def _check(status_code: int, body: str) -> bool:
        return all(p(status_code, body) for p in predicates)

    return _check


def any_of(*predicates: ValidationPredicate) -> ValidationPredicate:
    """Accept when at least one predicate accepts."""
    if not predicates:
        raise ValueError("any_of() needs at least one predicate")

    def _check(status_code: int, body: str) -> bool:
        return any(p(status_code, body) for p in predicates)

    return _check


def expect_response(status: int, text: str) -> ValidationPredicate:
    """Status equals *status* and the body contains *text*.

    Surrounding whitespace in the body is ignored, so a page served with a
    trailing newline still matches.
    """
    expected = text.strip()

    def _check(status_code: int, body: str) -> bool:
        return status_code == status and expected in body.strip()

    _check.__name__ = f"expect_{status}"
    return _check
