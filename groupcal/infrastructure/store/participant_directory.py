from __future__ import annotations

from groupcal.application.ports.participant_directory import ParticipantDirectoryPort


class ParticipantDirectory(ParticipantDirectoryPort):
    """Last known display name per participant id."""

    def __init__(self) -> None:
        self._names: dict[str, str] = {}

    def remember(self, participant_id: str, display_name: str | None) -> None:
        if display_name and display_name.strip():
            self._names[participant_id] = display_name.strip()

    def display_name(self, participant_id: str) -> str:
        return self._names.get(participant_id, participant_id)
