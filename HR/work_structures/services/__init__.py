from .organization_service import OrganizationService, OrganizationLookup
