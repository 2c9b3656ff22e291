from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import relationship
from inventory_manager.db.session import Base

class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column("productId", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    image_uri = Column("imageUri", Text, nullable=False)
    display_order = Column("displayOrder", Integer, nullable=False, default=0, server_default=text("0"))
    # At most one primary per product; the store enforces it, the schema does not
    is_primary = Column("isPrimary", Boolean, nullable=False, default=False, server_default=text("0"))

    created_at = Column("createdAt", Text, server_default=text("CURRENT_TIMESTAMP"))

    product = relationship("Product", back_populates="gallery")

    __table_args__ = (
        Index("idx_product_images_productId", product_id),
        Index("idx_product_images_isPrimary", is_primary),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<ProductImage(id={self.id}, product_id={self.product_id}, primary={self.is_primary})>"
