from sqlalchemy import Column, Integer, String

from pos_analytics.database.base import Base


class AppSetting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False, unique=True)
    currency = Column(String)
    language = Column(String)


__all__ = ["AppSetting"]
