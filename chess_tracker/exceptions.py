# chess_tracker/exceptions.py
"""
Defines custom exceptions for the Chess Tracker application.

The insight engine itself never raises: it is total over any well-formed
collection. These exceptions belong to the collaborators around it, the
record store, the record codec and the game log. A common
`ChessTrackerError` base lets the command-line host catch them in one place.
"""


class ChessTrackerError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class RecordStoreError(ChessTrackerError):
    """Base class for all record store errors."""
    pass


class RecordStoreConnectionError(RecordStoreError):
    """Raised when unable to connect to or initialize the record database."""
    pass


class RecordStoreReadError(RecordStoreError):
    """Raised when an error occurs while reading the stored record blob."""
    pass


class RecordStoreWriteError(RecordStoreError):
    """Raised when an error occurs while writing the record blob."""
    pass


class RecordCodecError(ChessTrackerError):
    """
    Raised when a stored record cannot be decoded into a Game or Mistake.

    The store catches this per record and skips the malformed entry, so one
    bad record never hides the rest of the log.
    """
    pass


class GameLogError(ChessTrackerError):
    """Base class for errors raised by game log mutations."""
    pass


class GameNotFoundError(GameLogError):
    """
    Raised when a mutation refers to a game id that is not in the log.

    Attributes:
        game_id: The id that could not be found.
    """
    def __init__(self, game_id: str):
        super().__init__(f"No game with id '{game_id}'.")
        self.game_id = game_id


class MissingFieldError(GameLogError):
    """Raised when a new or edited game is missing a required field."""
    def __init__(self, field_name: str):
        super().__init__(f"Required field '{field_name}' is missing.")
        self.field_name = field_name
