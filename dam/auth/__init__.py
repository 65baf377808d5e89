from .guards import current_user, install_access_policy, is_authenticated, login_required
from .policy import Allow, Redirect, RootPolicy, authorize

__all__ = [
    "Allow",
    "Redirect",
    "RootPolicy",
    "authorize",
    "current_user",
    "install_access_policy",
    "is_authenticated",
    "login_required",
]
