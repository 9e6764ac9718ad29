"""Reading transaction files and loading them into a service."""

import json
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .models.ledger import PointEvent
from .models.transactions import TransactionRequest
from .service import PointsService

console = Console(stderr=True)


def read_transactions(path: Path) -> list[TransactionRequest]:
    """Read transactions from a JSON Lines file.

    Each line is an object with ``payer``, ``points`` and ``timestamp``.
    Robust parsing: skips malformed lines with a warning.

    Args:
        path: Path to the .jsonl file

    Returns:
        Parsed transactions in file order
    """
    if not path.exists():
        return []

    transactions: list[TransactionRequest] = []
    malformed_count = 0

    # Binary mode so one undecodable line is skipped instead of aborting the read
    with open(path, "rb") as f:
        for line_no, raw_line in enumerate(f, 1):
            try:
                line = raw_line.decode("utf-8").strip()
                if not line:
                    continue
                transactions.append(TransactionRequest.model_validate(json.loads(line)))
            except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
                malformed_count += 1
                console.print(f"[yellow]Warning: Skipping malformed line {line_no}: {escape(str(e))}[/yellow]")

    if malformed_count > 0:
        console.print(f"[yellow]Skipped {malformed_count} malformed line(s)[/yellow]")

    return transactions


def load_transactions(
    service: PointsService, transactions: Iterable[TransactionRequest]
) -> list[PointEvent]:
    """Add each transaction to the service in the given order."""
    return [
        service.add_transaction(t.payer, t.points, t.timestamp)
        for t in transactions
    ]
