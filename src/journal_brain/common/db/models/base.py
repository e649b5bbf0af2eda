# declarative base for the main corpus db
from sqlalchemy.orm import DeclarativeBase

class MainDB_Base(DeclarativeBase):
    pass
