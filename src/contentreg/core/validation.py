from __future__ import annotations

from typing import Protocol


class ValidationGate(Protocol):
    def __call__(self, fingerprint: bytes, rule: str) -> bool: ...


def prefix_gate(fingerprint: bytes, rule: str) -> bool:
    """Accept fingerprints that start with the UTF-8 bytes of `rule`.

    An empty rule accepts everything.
    """

    return fingerprint.startswith(rule.encode("utf-8"))


def accept_all(fingerprint: bytes, rule: str) -> bool:  # noqa: ARG001
    return True


def select_gate(*, gated: bool = True, gate: ValidationGate | None = None) -> ValidationGate:
    if gate is not None:
        return gate
    return prefix_gate if gated else accept_all
