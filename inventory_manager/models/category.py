from sqlalchemy import Column, Integer, Text, text
from inventory_manager.db.session import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)

    created_at = Column("createdAt", Text, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column("updatedAt", Text, server_default=text("CURRENT_TIMESTAMP"))

    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
