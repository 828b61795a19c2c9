# hoops_admin/errors/session_errors.py

class TrainingSessionError(Exception):
    """Base exception for training session errors."""
    pass

class TrainingSessionNotFound(TrainingSessionError):
    """Raised when a training session is not found."""
    pass

class InvalidTrainingSession(TrainingSessionError):
    """Raised when session times or roster are invalid."""
    pass

class CoachScheduleConflict(TrainingSessionError):
    """Raised when a coach is already booked for an overlapping session."""
    pass
