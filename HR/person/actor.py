"""
Actor context passed explicitly into every employee-record service call.

Views build it once from the authenticated user; services never look at the
request or at the user model directly.
"""
from dataclasses import dataclass
from typing import Optional

from django.conf import settings


@dataclass(frozen=True)
class ActorContext:
    user_id: Optional[int] = None
    username: str = 'system'
    is_privileged: bool = False
    company_id: Optional[int] = None
    department_id: Optional[int] = None
    section_id: Optional[int] = None
    position_id: Optional[int] = None
    role_level: int = 0
    max_role_level: int = 0

    @classmethod
    def from_user(cls, user):
        """
        Build the context from a CustomUser.

        Privileged = owner account type. Role levels come from
        the user's job role and the highest level defined in the system.
        """
        from core.job_roles.models import JobRole

        job_role = getattr(user, 'job_role', None)
        return cls(
            user_id=user.pk,
            username=user.name or user.email,
            is_privileged=user.is_owner(),
            company_id=user.company_id,
            department_id=user.department_id,
            section_id=user.section_id,
            position_id=user.position_id,
            role_level=job_role.access_level if job_role else 0,
            max_role_level=JobRole.max_access_level() if job_role else 0,
        )

    @property
    def has_global_scope(self):
        """May see employee data of every company."""
        full_access = getattr(settings, 'FULL_ACCESS_ROLE_LEVEL', 4)
        return self.is_privileged or self.role_level >= full_access

    @property
    def is_company_top(self):
        """No department scope, or the highest role level defined."""
        if not self.department_id:
            return True
        return self.max_role_level > 0 and self.role_level >= self.max_role_level

    def can_access_company(self, company_id):
        if self.has_global_scope:
            return True
        return company_id is not None and company_id == self.company_id
