"""Access control tests — single administrator capability."""

from voting.core.domain_types import PrincipalId
from voting.infrastructure.access_control import SingleAdminAccess


def test_only_the_admin_is_admin():
    access = SingleAdminAccess(PrincipalId("0xA11CE"))
    assert access.is_admin(PrincipalId("0xA11CE"))
    assert not access.is_admin(PrincipalId("0xa11ce"))
    assert not access.is_admin(PrincipalId("bob"))
