"""
Core Base Module

Provides shared base classes, mixins, and utilities for all modules.

Exports:
    Basic Utilities:
        - StatusChoices: Standard ACTIVE/INACTIVE status choices

    Individual Feature Mixins:
        - AuditMixin: Adds created_at, updated_at, created_by, updated_by
        - SoftDeleteMixin: Adds status + soft delete behavior
        - AppendOnlyMixin: Forbids update/delete of saved rows

    Managers & QuerySets (core.base.managers):
        - SoftDeleteQuerySet, SoftDeleteManager

    Exceptions (core.base.exceptions):
        - ConflictError, AuthorizationError, NotFoundError

Models are not re-exported here so this package can be imported before the
app registry is ready (settings, exception handler).
"""
