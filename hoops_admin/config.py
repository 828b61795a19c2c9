import os

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost:5432")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "<PASSWORD>")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "postgres")
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "secret")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", 60))
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "prod")
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("JWT_REFRESH_TOKEN_EXPIRE_DAYS", 30))
    GOOGLE_DISCOVERY_URL: str = os.getenv("GOOGLE_DISCOVERY_URL", "https://www.googleapis.com/oauth2/v3/userinfo")
    GOOGLE_TIMEOUT_SECONDS: float = float(os.getenv("GOOGLE_TIMEOUT_SECONDS", 5))
    DEV_ADMIN_EMAIL: str = os.getenv("DEV_ADMIN_EMAIL", "admin@takeoverhoops.local")

    # Количество сессий в пакете, если роль не может задавать его сама
    DEFAULT_PLAYER_SESSIONS: int = int(os.getenv("DEFAULT_PLAYER_SESSIONS", 8))

    # Через сколько минут после начала сессии тренер без отметки считается отсутствующим
    COACH_ATTENDANCE_GRACE_MINUTES: int = int(os.getenv("COACH_ATTENDANCE_GRACE_MINUTES", 60))

    # Внешний сервис email-уведомлений (пустой URL - уведомления отключены)
    NOTIFICATION_URL: str = os.getenv("NOTIFICATION_URL", "")
    NOTIFICATION_API_KEY: str = os.getenv("NOTIFICATION_API_KEY", "")
    NOTIFICATION_TIMEOUT_SECONDS: float = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", 10))

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        extra = "ignore"

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}/{self.POSTGRES_DB}"


# Читаем конфигурацию
config = Config()
