from pitchside.models.notification import Notification
from pitchside.models.player import Player
from pitchside.models.tournament import Tournament, TournamentStatus
from pitchside.models.tournament_slot import SlotStatus, TournamentSlot
from pitchside.models.user import User

__all__ = [
    "User",
    "Player",
    "Tournament",
    "TournamentStatus",
    "TournamentSlot",
    "SlotStatus",
    "Notification",
]
