from . import (
    attendance,
    branch,
    coach_attendance,
    package,
    package_history,
    payment,
    player,
    training_session,
    user,
)
