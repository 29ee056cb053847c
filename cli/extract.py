#!/usr/bin/env python3

import sys
from pathlib import Path
from logger import get_logger
from money import format_money

logger = get_logger()


def _read_document(path_arg: str) -> str:
    path = Path(path_arg)
    if not path.exists():
        logger.error(f"File not found: {path}")
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _confirm(args, question: str) -> bool:
    if args.yes:
        return True
    return input(f"\n{question} (yes/no): ").strip().lower() == "yes"


def cmd_transactions(args, services):
    """Extract transactions from a statement or receipt and add them to the ledger."""
    services.participants.get(args.participant_id)
    text = _read_document(args.file)

    result = services.extraction.extract_transactions(text)
    categories = {c.id: c.name for c in services.categories.find_all()}

    if result.rejected:
        logger.info(f"\nRejected {len(result.rejected)} line(s):")
        for rejected in result.rejected:
            logger.info(f"  ✗ {rejected.description or '(no description)'}: {rejected.reason}")

    if not result.candidates:
        logger.info("No transactions to save.")
        return

    logger.info(f"\nFound {len(result.candidates)} transaction(s):")
    for candidate in result.candidates:
        flag = " [uncategorized]" if candidate.uncategorized else ""
        logger.info(
            f"  {candidate.date}  {candidate.description[:40]:<40} "
            f"{format_money(candidate.amount):>12}  "
            f"{categories.get(candidate.category_id, '?')} ({candidate.confidence}){flag}"
        )

    if not _confirm(args, "Add these transactions to the ledger?"):
        logger.info("Nothing saved.")
        return

    entries = services.extraction.save_transactions(args.participant_id, result.candidates)
    logger.info(f"✓ Updated {len(entries)} ledger entries")


def cmd_deduction(args, services):
    """Extract a boleto from a document and save it as a deduction."""
    services.participants.get(args.participant_id)
    text = _read_document(args.file)

    candidate = services.extraction.extract_deduction(text)
    logger.info("\nBoleto found:")
    logger.info(f"  Description: {candidate.description}")
    logger.info(f"  Amount: {format_money(candidate.amount, services.config.local_currency)}")
    logger.info(f"  Due date: {candidate.due_date}")

    if not _confirm(args, "Save this deduction?"):
        logger.info("Nothing saved.")
        return

    deduction = services.extraction.save_deduction(
        args.participant_id, candidate, month=args.month, year=args.year
    )
    logger.info(
        f"✓ Deduction {deduction.id} added to {deduction.year:04d}/{deduction.month:02d}"
    )


def setup_parser(subparsers):
    """Setup extract subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "extract",
        help="Extract data from documents",
        description="Use the LLM provider to read transactions or boletos from text files",
    )

    extract_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available extraction commands",
        dest="subcommand",
        required=True,
    )

    transactions_parser = extract_subparsers.add_parser(
        "transactions", help="Extract transactions from a statement or receipt"
    )
    transactions_parser.add_argument("file", help="Path to the document text")
    transactions_parser.add_argument("--participant-id", type=int, required=True)
    transactions_parser.add_argument(
        "--yes", action="store_true", help="Save without asking for confirmation"
    )
    transactions_parser.set_defaults(func=cmd_transactions)

    deduction_parser = extract_subparsers.add_parser(
        "deduction", help="Extract a boleto as a deduction"
    )
    deduction_parser.add_argument("file", help="Path to the document text")
    deduction_parser.add_argument("--participant-id", type=int, required=True)
    deduction_parser.add_argument("--month", type=int, help="Defaults to the due month")
    deduction_parser.add_argument("--year", type=int, help="Defaults to the due year")
    deduction_parser.add_argument(
        "--yes", action="store_true", help="Save without asking for confirmation"
    )
    deduction_parser.set_defaults(func=cmd_deduction)
