# hoops_admin/errors/attendance_errors.py

class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass

class AttendanceRecordNotFound(AttendanceError):
    """Raised when an attendance record is not found."""
    pass

class InvalidAttendanceUpdate(AttendanceError):
    """Raised when an attendance update carries invalid values."""
    pass

class CoachAttendanceNotAllowed(AttendanceError):
    """Raised when a coach logs attendance for another coach's session."""
    pass
