"""Route access policy.

``authorize`` is a pure function of the request path and whether the session
is authenticated. It is evaluated once per request before any page renders.

What happens on ``/`` is configurable because two behaviours have shipped:
always landing on the gallery, or sending anonymous visitors to sign-in.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

PROTECTED_PREFIXES: tuple[str, ...] = ("/dashboard", "/gallery", "/upload", "/setup")
SIGN_IN_PATH = "/auth/signin"
LANDING_PATH = "/gallery"
ROOT_PATH = "/"


class RootPolicy(enum.Enum):
    ALWAYS_GALLERY = "gallery"
    BY_SESSION = "session"

    @classmethod
    def parse(cls, raw: "str | RootPolicy | None") -> "RootPolicy":
        if isinstance(raw, cls):
            return raw
        value = (raw or "").strip().lower()
        for policy in cls:
            if policy.value == value:
                return policy
        raise ValueError(f"Unknown root redirect policy: {raw!r}")


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Redirect:
    target: str


Decision = Union[Allow, Redirect]

ALLOW = Allow()


def is_protected(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES)


def authorize(
    path: str,
    is_authenticated: bool,
    root_policy: RootPolicy = RootPolicy.ALWAYS_GALLERY,
) -> Decision:
    if is_protected(path) and not is_authenticated:
        return Redirect(SIGN_IN_PATH)

    if path == SIGN_IN_PATH and is_authenticated:
        return Redirect(LANDING_PATH)

    if path == ROOT_PATH:
        if root_policy is RootPolicy.ALWAYS_GALLERY or is_authenticated:
            return Redirect(LANDING_PATH)
        return Redirect(SIGN_IN_PATH)

    return ALLOW
