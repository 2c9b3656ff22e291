class CatalogError(Exception):
    """Base class for errors raised by the catalog store itself.

    Storage engine failures (SQLAlchemy errors) are not wrapped and reach the
    caller unchanged.
    """


class NotInitializedError(CatalogError):
    def __init__(self, message: str = "Database not initialized"):
        super().__init__(message)


class NotFoundError(CatalogError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidGstSlabError(CatalogError):
    def __init__(self, gst_slab: float, allowed: tuple):
        self.gst_slab = gst_slab
        self.allowed = allowed
        super().__init__(f"GST slab {gst_slab} is not one of {list(allowed)}")


class InvalidImageUriError(CatalogError, ValueError):
    def __init__(self, image_uri: str):
        self.image_uri = image_uri
        super().__init__("Image URI must not be blank")
