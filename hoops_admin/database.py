from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
import os

from hoops_admin.config import config  # Создаем подключение к базе

engine = create_engine(config.SQLALCHEMY_DATABASE_URI)

# Создаем сессию для работы с базой данных
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Базовый класс для всех моделей
Base = declarative_base()


from sqlalchemy.orm import Session

@contextmanager
def transactional(db: Session):
    """
    Единица атомарности для всех операций учета.

    В обычном режиме коммитит транзакцию или откатывает ее при любой ошибке,
    так что ни одна операция не оставляет частично записанного состояния.
    В тестах (TESTING=true) только делает flush, а откат остается
    за фикстурой тестовой сессии.
    """
    is_test_mode = os.getenv("TESTING", "false").lower() == "true"

    if not is_test_mode:
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
    else:
        try:
            yield db
            db.flush()
        except Exception:
            db.rollback()
            raise
