"""Decision engine mapping the installed version and a policy to a result."""

from __future__ import annotations

from update_checker.models import CheckResult, UpdatePolicy
from update_checker.version import compare_versions


def decide(current_version: str, policy: UpdatePolicy) -> CheckResult:
    """Return the :class:`CheckResult` for *current_version* under *policy*.

    The mandatory floor is checked first, so a version below
    ``minimum_required_version`` is never reported as an optional update.

    Raises:
        InvalidVersionFormatError: If *current_version* cannot be parsed.
    """
    latest = policy.latest_available_version
    minimum = policy.minimum_required_version
    if minimum is not None and compare_versions(current_version, minimum) < 0:
        return CheckResult.mandatory_update(latest, policy.metadata)
    if compare_versions(current_version, latest) < 0:
        return CheckResult.optional_update(latest, policy.notification_type, policy.metadata)
    return CheckResult.no_update(latest, policy.metadata)
