"""
Person Domain

Handles the employee record lifecycle across companies:
- Person identity and de-duplication
- Employments (one per person per company)
- Status ledger (inactive / blacklist / violation)
- Cross-company mobility and mutation approvals
- Field-level audit trail
- Bulk spreadsheet reconciliation
"""
