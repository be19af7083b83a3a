# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from pitchside.models.notification import Notification  # noqa: F401
from pitchside.models.player import Player  # noqa: F401
from pitchside.models.tournament import Tournament  # noqa: F401
from pitchside.models.tournament_slot import TournamentSlot  # noqa: F401
from pitchside.models.user import User  # noqa: F401
