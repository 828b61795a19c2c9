from .user import UserRole, User
from .branch import Branch
from .package import PackageStatus, Package
from .player import Player
from .training_session import SessionStatus, TrainingSession
from .attendance import AttendanceStatus, AttendanceRecord
from .coach_attendance import CoachAttendance
from .package_history import RenewalReason, PackageHistory
from .payment import PlayerPayment
