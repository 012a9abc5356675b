"""
Tool: Finance Intake
Purpose: Profile settings, financial accounts and transaction import for a user

Usage:
    python -m lifeos.finance.intake --action profile --user alice --name "Alice" --currency USD
    python -m lifeos.finance.intake --action add-account --user alice --label "Chime" --type checking --balance 120
    python -m lifeos.finance.intake --action import --user alice --csv ./export.csv

Output:
    JSON result with success status and data
"""

import argparse
import csv
import io
import json
import logging
import sys
from pathlib import Path
from typing import Any

from lifeos.database import generate_id, get_connection
from lifeos.errors import LifeOSError, NotFoundError, UnauthorizedError
from lifeos.momentum.repository import SQLiteUserRepository, User

from . import (
    ACCOUNT_TYPES,
    AMOUNT_HEADERS,
    CURRENCIES,
    DATE_HEADERS,
    DESCRIPTION_HEADERS,
)


logger = logging.getLogger(__name__)


def _require_actor(actor: str | None) -> str:
    if not actor:
        raise UnauthorizedError("Unauthorized")
    return actor


def _user_exists(conn, user_id: str) -> bool:
    return conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone() is not None


# =============================================================================
# Profile
# =============================================================================


def update_profile(
    actor: str | None,
    name: str | None = None,
    currency: str | None = None,
    time_zone: str | None = None,
    db_path: Path | None = None,
) -> User:
    """Update the authenticated user's profile settings."""
    actor = _require_actor(actor)
    if currency is not None and currency not in CURRENCIES:
        raise ValueError(f"Invalid currency. Must be one of: {CURRENCIES}")

    users = SQLiteUserRepository(db_path)
    users.create(actor)
    return users.update_profile(actor, name=name, currency=currency, time_zone=time_zone)


# =============================================================================
# Accounts
# =============================================================================


def create_account(
    actor: str | None,
    label: str,
    account_type: str,
    starting_balance: float | str = 0,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """
    Create a financial account for the user.

    Raises:
        ValueError: Empty label, unknown type or non-numeric balance
        NotFoundError: No user profile yet
    """
    actor = _require_actor(actor)
    label = (label or "").strip()
    if not label:
        raise ValueError("Account label is required")
    if account_type not in ACCOUNT_TYPES:
        raise ValueError(f"Invalid account type. Must be one of: {ACCOUNT_TYPES}")
    try:
        balance = float(starting_balance)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid starting balance: {starting_balance!r}") from None

    conn = get_connection(db_path)
    if not _user_exists(conn, actor):
        conn.close()
        raise NotFoundError("No user profile found. Please save profile first.")

    account_id = generate_id()
    conn.execute(
        "INSERT INTO accounts (id, user_id, label, type, starting_balance) VALUES (?, ?, ?, ?, ?)",
        (account_id, actor, label, account_type, balance),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM accounts WHERE id = ?", (account_id,)).fetchone()
    conn.close()

    return dict(row)


def list_accounts(actor: str | None, db_path: Path | None = None) -> list[dict[str, Any]]:
    actor = _require_actor(actor)
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM accounts WHERE user_id = ? ORDER BY created_at, rowid", (actor,)
    ).fetchall()
    conn.close()
    return [dict(row) for row in rows]


# =============================================================================
# Transactions
# =============================================================================


def parse_csv_preview(text: str, limit: int | None = 5) -> list[dict[str, str]]:
    """
    Parse CSV text into header-keyed rows.

    Args:
        text: CSV contents with a header line
        limit: Maximum rows to return (None for all)

    Raises:
        ValueError: The CSV has no header line
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise ValueError("CSV appears to be empty.")

    reader = csv.DictReader(io.StringIO("\n".join(lines)))
    rows = []
    for row in reader:
        rows.append({key.strip(): (value or "").strip() for key, value in row.items() if key})
        if limit is not None and len(rows) >= limit:
            break
    return rows


def _pick(row: dict[str, Any], candidates: tuple[str, ...]) -> Any:
    lowered = {str(key).strip().lower(): value for key, value in row.items()}
    for name in candidates:
        if lowered.get(name) not in (None, ""):
            return lowered[name]
    return None


def _parse_amount(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "").replace("$", "")
    # Accounting style negatives: (12.50)
    if text.startswith("(") and text.endswith(")"):
        text = "-" + text[1:-1]
    try:
        return float(text)
    except ValueError:
        return None


def normalize_transaction(row: dict[str, Any]) -> dict[str, Any]:
    """Map a CSV-derived row onto date/description/amount."""
    return {
        "date": _pick(row, DATE_HEADERS),
        "description": _pick(row, DESCRIPTION_HEADERS),
        "amount": _parse_amount(_pick(row, AMOUNT_HEADERS)),
    }


def import_transactions(
    actor: str | None,
    rows: list[dict[str, Any]] | None,
    account_id: str | None = None,
    db_path: Path | None = None,
) -> int:
    """
    Store imported transaction rows for the user.

    Returns:
        Number of rows imported
    """
    actor = _require_actor(actor)
    rows = rows or []
    if not rows:
        return 0

    conn = get_connection(db_path)
    try:
        if not _user_exists(conn, actor):
            raise NotFoundError("No user profile found. Please save profile first.")
        if account_id is not None:
            owner = conn.execute(
                "SELECT user_id FROM accounts WHERE id = ?", (account_id,)
            ).fetchone()
            if owner is None or owner["user_id"] != actor:
                raise UnauthorizedError("Unauthorized access to account")

        for row in rows:
            normalized = normalize_transaction(row)
            conn.execute(
                """
                INSERT INTO transactions (id, user_id, account_id, date, description, amount, raw)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    generate_id(),
                    actor,
                    account_id,
                    normalized["date"],
                    normalized["description"],
                    normalized["amount"],
                    json.dumps(row),
                ),
            )
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

    logger.info(f"Imported {len(rows)} transactions for {actor}")
    return len(rows)


def main():
    parser = argparse.ArgumentParser(description="Finance Intake")
    parser.add_argument(
        "--action",
        required=True,
        choices=["profile", "add-account", "list-accounts", "import"],
        help="Action to perform",
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--name", help="Display name")
    parser.add_argument("--currency", choices=CURRENCIES, help="Currency")
    parser.add_argument("--time-zone", help="Time zone")
    parser.add_argument("--label", help="Account label")
    parser.add_argument("--type", choices=ACCOUNT_TYPES, default="checking", help="Account type")
    parser.add_argument("--balance", default="0", help="Starting balance")
    parser.add_argument("--csv", help="CSV file to import")
    parser.add_argument("--account-id", help="Account the transactions belong to")

    args = parser.parse_args()

    try:
        if args.action == "profile":
            user = update_profile(args.user, args.name, args.currency, args.time_zone)
            result = {"success": True, "data": user.to_dict()}

        elif args.action == "add-account":
            account = create_account(args.user, args.label, args.type, args.balance)
            result = {"success": True, "data": account}

        elif args.action == "list-accounts":
            result = {"success": True, "data": list_accounts(args.user)}

        else:
            if not args.csv:
                print("Error: --csv required for import")
                sys.exit(1)
            rows = parse_csv_preview(Path(args.csv).read_text(), limit=None)
            count = import_transactions(args.user, rows, account_id=args.account_id)
            result = {"success": True, "count": count}

    except (LifeOSError, ValueError, OSError) as e:
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2))
    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
