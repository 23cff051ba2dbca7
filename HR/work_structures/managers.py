"""
HR Managers - Organizational Data Scope

Rows that carry an organizational placement (company / department / section /
position) are filtered by the actor's own placement:

- Global scope (privileged actor, or role level >= FULL_ACCESS_ROLE_LEVEL):
  everything
- Otherwise the narrowest placement the actor has: position, then section,
  then department, then company
- No placement at all: nothing

Usage:
    class EmployeeQuerySet(ScopedQuerySetMixin, models.QuerySet):
        pass

    Employee.objects.scoped(actor).filter(is_active=True)
"""


class ScopedQuerySetMixin:
    """
    Mixin implementing hierarchical data scoping.

    Subclasses may override the *_field attributes when the placement
    columns are named differently.
    """
    company_field = 'company_id'
    department_field = 'department_id'
    section_field = 'section_id'
    position_field = 'position_id'

    def scoped(self, actor):
        """
        Filter QuerySet by the actor's data scope.

        Args:
            actor: HR.person.actor.ActorContext
        """
        if actor.has_global_scope:
            return self.all()

        if actor.position_id:
            return self.filter(**{self.position_field: actor.position_id})
        if actor.section_id:
            return self.filter(**{self.section_field: actor.section_id})
        if actor.department_id:
            return self.filter(**{self.department_field: actor.department_id})
        if actor.company_id:
            return self.filter(**{self.company_field: actor.company_id})

        # No placement = no access
        return self.none()
