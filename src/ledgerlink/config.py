"""
Central configuration for ledgerlink.

Path resolution lives in ledgerlink.workspace.Workspace, which provides a
single workspace root with computed path properties for all data locations.

Matching defaults below are used when neither config/linking.yml nor the CLI
supplies a value.
"""

# Collection tag under which bank operations are stored
OPERATIONS_DOCTYPE = "bank.operations"

# Namespace used when an operation references a bill ("bills:<id>")
BILLS_DOCTYPE = "bills"

DEFAULT_AMOUNT_DELTA = 0.001
DEFAULT_DATE_DELTA = 15

# Bill types that can represent money returned for a prior expense
REIMBURSED_TYPES = ("health_costs",)
