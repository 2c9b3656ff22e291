from sqlalchemy import REAL, Column, Index, Integer, Text, text
from sqlalchemy.orm import relationship
from inventory_manager.db.session import Base

class Product(Base):
    __tablename__ = "products"

    # Column names are camelCase on disk to stay readable by existing installations
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False)  # matched to categories.name, not a foreign key
    price = Column(REAL, nullable=False)
    discount_price = Column("discountPrice", REAL, nullable=True)
    gst_slab = Column("gstSlab", REAL, nullable=True)
    quantity = Column(Integer, default=0, server_default=text("0"))
    details = Column(Text, nullable=True)
    image_uri = Column("imageUri", Text, nullable=True)  # mirror of the primary ProductImage

    created_at = Column("createdAt", Text, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column("updatedAt", Text, server_default=text("CURRENT_TIMESTAMP"))

    gallery = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductImage.display_order",
    )

    __table_args__ = (
        Index("idx_products_name", name),
        Index("idx_products_category", category),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
