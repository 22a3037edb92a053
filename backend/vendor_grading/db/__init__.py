from vendor_grading.db.session import Base, engine, async_session_maker, get_db
from vendor_grading.db.base_class import BaseModel

__all__ = ["Base", "BaseModel", "engine", "async_session_maker", "get_db"]
