"""Finance Intake - profile, accounts and transaction import

The first look at someone's money: who they are (name, currency, time
zone), which accounts they hold, and a CSV export of recent transactions.

Components:
    intake.py: Profile updates, account creation, CSV parsing and import
"""

ACCOUNT_TYPES = ("checking", "savings", "credit", "investment", "other")

CURRENCIES = ("USD", "EUR", "GBP", "CAD", "AUD", "JPY")

# Header names recognised when normalising imported rows
DATE_HEADERS = ("date", "transaction date", "posted date", "posting date")
DESCRIPTION_HEADERS = ("description", "memo", "payee", "details", "name")
AMOUNT_HEADERS = ("amount", "value", "total")

__all__ = [
    "ACCOUNT_TYPES",
    "AMOUNT_HEADERS",
    "CURRENCIES",
    "DATE_HEADERS",
    "DESCRIPTION_HEADERS",
]
