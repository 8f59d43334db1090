"""Access Control — AccessControl implementation for a single trusted administrator.

Invariants:
    - Exactly one administrator per election: the principal that created it
    - Comparison is exact on the opaque principal string

Design Decisions:
    - Capability object passed to the controller, not an inherited mixin
"""

from voting.core.domain_types import PrincipalId


class SingleAdminAccess:
    """Grants the admin capability to one fixed principal."""

    def __init__(self, admin: PrincipalId):
        self.admin = admin

    def is_admin(self, caller: PrincipalId) -> bool:
        return caller == self.admin
