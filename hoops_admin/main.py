import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from hoops_admin.auth.auth import router as auth_router
from hoops_admin.endpoints import (
    attendance,
    branches,
    coaches,
    health,
    package_types,
    payments,
    players,
    training_sessions,
)

# Логи всего пакета hoops_admin идут в один консольный обработчик
logger = logging.getLogger("hoops_admin")
logger.setLevel(logging.DEBUG)

ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
ch.setFormatter(formatter)

logger.addHandler(ch)

logger.info("Application started and logger configured.")


app = FastAPI(
    title="TakeOver Hoops Admin API",
    description="API для учета игроков, пакетов тренировок, посещаемости и оплат",
    version="1.0.0"
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Регистрация маршрутов
app.include_router(auth_router)
app.include_router(health.router)
app.include_router(players.router)
app.include_router(attendance.router)
app.include_router(payments.router)
app.include_router(training_sessions.router)
app.include_router(branches.router)
app.include_router(package_types.router)
app.include_router(coaches.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to TakeOver Hoops Admin API"}


# Обработка ошибок валидации
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        if 'ctx' in error and 'error' in error['ctx']:
            # Если ошибка содержит ValueError, берем его сообщение
            if isinstance(error['ctx']['error'], ValueError):
                error['msg'] = str(error['ctx']['error'])
                del error['ctx']
        errors.append(error)

    return JSONResponse(
        status_code=422,
        content={"detail": errors},
    )
