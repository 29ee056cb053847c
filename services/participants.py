"""Participant service for database operations."""

from datetime import datetime
from typing import List, Optional

from errors import NotFoundError, ValidationError
from models.participant import PARTICIPANT_COLORS, Participant

MAX_PARTICIPANTS = 2

_PARTICIPANT_FIELDS = "id, name, email, color, created_at"


class ParticipantService:
    """Service for the two household participants."""

    def __init__(self, db_manager):
        """Initialize the participant service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Participant]:
        """Get all participants, ordered by id."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_PARTICIPANT_FIELDS} FROM participants ORDER BY id"
            )
            return [self._row_to_participant(row) for row in cursor.fetchall()]

    def find(self, participant_id: int) -> Optional[Participant]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_PARTICIPANT_FIELDS} FROM participants WHERE id = ?",
                (participant_id,),
            )
            row = cursor.fetchone()
            return self._row_to_participant(row) if row else None

    def find_by_color(self, color: str) -> Optional[Participant]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_PARTICIPANT_FIELDS} FROM participants WHERE color = ?",
                (color,),
            )
            row = cursor.fetchone()
            return self._row_to_participant(row) if row else None

    def find_by_email(self, email: str) -> Optional[Participant]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_PARTICIPANT_FIELDS} FROM participants WHERE email = ?",
                (email,),
            )
            row = cursor.fetchone()
            return self._row_to_participant(row) if row else None

    def get(self, participant_id: int) -> Participant:
        """Get a participant by ID or raise.

        Raises:
            NotFoundError: If the participant does not exist.
        """
        participant = self.find(participant_id)
        if participant is None:
            raise NotFoundError("Participant", participant_id)
        return participant

    def counterpart_of(self, participant_id: int) -> Participant:
        """Get the other participant of the household.

        Raises:
            ValidationError: If the household does not have both participants.
            NotFoundError: If participant_id is not one of them.
        """
        participants = self.find_all()
        if len(participants) != MAX_PARTICIPANTS:
            raise ValidationError(
                f"Settlement needs exactly {MAX_PARTICIPANTS} participants, "
                f"found {len(participants)}"
            )
        others = [p for p in participants if p.id != participant_id]
        if len(others) != 1:
            raise NotFoundError("Participant", participant_id)
        return others[0]

    def create(self, name: str, email: str, color: str) -> Participant:
        """Provision one of the two participants.

        Args:
            name: Display name.
            email: Login email (unique).
            color: "blue" or "pink" (unique).

        Returns:
            The created Participant.

        Raises:
            ValidationError: If the color is invalid or taken, the name is
                empty, or both participants already exist.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Participant name cannot be empty", "name")
        if color not in PARTICIPANT_COLORS:
            raise ValidationError(
                f"color must be one of {', '.join(PARTICIPANT_COLORS)}, got {color!r}",
                "color",
            )

        existing = self.find_all()
        if len(existing) >= MAX_PARTICIPANTS:
            raise ValidationError(
                f"The household already has {MAX_PARTICIPANTS} participants"
            )
        if any(p.color == color for p in existing):
            raise ValidationError(f"Color {color!r} is already taken", "color")
        if any(p.email == email for p in existing):
            raise ValidationError(f"Email {email!r} is already registered", "email")

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO participants (name, email, color) VALUES (?, ?, ?)",
                (name, email, color),
            )
            conn.commit()
            participant_id = cursor.lastrowid

        return self.get(participant_id)

    def _row_to_participant(self, row: tuple) -> Participant:
        return Participant(
            id=row[0],
            name=row[1],
            email=row[2],
            color=row[3],
            created_at=datetime.fromisoformat(row[4]) if row[4] else None,
        )
