from sqlalchemy.orm import Session


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    @property
    def dialect_name(self) -> str:
        """Name of the bound dialect, e.g. 'postgresql' or 'sqlite'."""
        return self.db.get_bind().dialect.name
