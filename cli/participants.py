#!/usr/bin/env python3

import sys
from errors import ValidationError
from logger import get_logger
from models.participant import PARTICIPANT_COLORS

logger = get_logger()


def cmd_list(args, services):
    """List the household participants."""
    participants = services.participants.find_all()

    if not participants:
        logger.info("No participants found. Run 'python -m cli participants create'.")
        return

    logger.info("\nParticipants:")
    logger.info("=" * 80)
    for participant in participants:
        logger.info(f"ID: {participant.id}")
        logger.info(f"Name: {participant.name}")
        logger.info(f"Email: {participant.email}")
        logger.info(f"Color: {participant.color}")
        profile = services.salary_profiles.find_by_participant(participant.id)
        if profile:
            logger.info(f"Salary: {profile.role} ({profile.currency})")
        logger.info("-" * 80)

    logger.info(f"\nTotal participants: {len(participants)}")


def cmd_create(args, services):
    """Interactively create a participant."""
    print("\nCreate New Participant")
    print("=" * 80)

    name = args.name or input("Name: ").strip()
    email = args.email or input("Email: ").strip()
    color = args.color or input(f"Color ({'/'.join(PARTICIPANT_COLORS)}): ").strip().lower()

    try:
        participant = services.participants.create(name, email, color)
    except ValidationError as e:
        logger.error(f"Error creating participant: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Participant created successfully with ID: {participant.id}")
    logger.info(f"  Name: {participant.name}")
    logger.info(f"  Color: {participant.color}")


def setup_parser(subparsers):
    """Setup participants subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "participants",
        help="Manage participants",
        description="List and create the two household participants",
    )

    participants_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available participant commands",
        dest="subcommand",
        required=True,
    )

    list_parser = participants_subparsers.add_parser("list", help="List participants")
    list_parser.set_defaults(func=cmd_list)

    create_parser = participants_subparsers.add_parser(
        "create", help="Create a participant (prompts for missing fields)"
    )
    create_parser.add_argument("--name", help="Display name")
    create_parser.add_argument("--email", help="Login email")
    create_parser.add_argument("--color", choices=PARTICIPANT_COLORS, help="Color")
    create_parser.set_defaults(func=cmd_create)
