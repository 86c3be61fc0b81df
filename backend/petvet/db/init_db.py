from sqlalchemy.engine import Engine

from petvet.db.base import Base
from petvet.db.session import engine as default_engine

# IMPORTANT: import models so they register with Base.metadata
import petvet.db.models  # noqa: F401


def init_db(bind: Engine | None = None) -> None:
    Base.metadata.create_all(bind=bind or default_engine)
