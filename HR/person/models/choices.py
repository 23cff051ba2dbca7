from django.db import models


class Citizenship(models.TextChoices):
    DOMESTIC = 'WNI', 'Domestic citizen'
    FOREIGN = 'WNA', 'Foreign citizen'


class StatusType(models.TextChoices):
    """Kinds of entries in the status ledger."""
    INACTIVE = 'nonaktif', 'Inactive'
    BLACKLIST = 'blacklist', 'Blacklisted'
    VIOLATION = 'pelanggaran', 'Violation'


class MobilityClass(models.TextChoices):
    """How an employment relates to the NIK's history at other companies."""
    REKRUT = 'rekrut', 'New hire'
    KONTRAK = 'kontrak', 'Transfer of an active contract'
    REHIRE = 'rehire', 'Rehire after deactivation'
    MUTASI = 'mutasi', 'Internal placement change'


class RequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class ChangeSource(models.TextChoices):
    """Where a placement or audited change originated."""
    CREATE = 'create', 'Create'
    EDIT = 'edit', 'Edit'
    IMPORT = 'import', 'Bulk import'
    LIST_ACTION = 'list_action', 'Status action'
    OWNER_CLEAR = 'owner_clear', 'Blacklist cleared by owner'
