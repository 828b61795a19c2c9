# hoops_admin/errors/player_errors.py

class PlayerError(Exception):
    """Base exception for player-related errors."""
    pass

class PlayerNotFound(PlayerError):
    """Raised when a player is not found."""
    pass

class InvalidPlayerData(PlayerError):
    """Raised when player input fails validation before any write."""
    pass
