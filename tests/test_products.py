import pytest
from pydantic import ValidationError

from conftest import make_product, make_settings
from inventory_manager.core.exceptions import InvalidGstSlabError, NotFoundError, NotInitializedError
from inventory_manager.schemas.product import ProductCreate, ProductUpdate, SortOption
from inventory_manager.services.catalog_store import CatalogStore


async def test_add_product_with_gallery(store):
    product_id = await store.add_product(
        make_product(images=["file:///a.jpg", "file:///b.jpg", "file:///c.jpg"])
    )

    product = await store.get_product(product_id)
    assert product.images == ["file:///a.jpg", "file:///b.jpg", "file:///c.jpg"]
    assert product.image_uri == "file:///a.jpg"

    images = await store.get_images(product_id)
    assert [image.display_order for image in images] == [0, 1, 2]
    assert [image.is_primary for image in images] == [True, False, False]


async def test_add_product_with_single_image_uri(store):
    product_id = await store.add_product(make_product(image_uri="file:///only.jpg"))

    product = await store.get_product(product_id)
    assert product.images == ["file:///only.jpg"]
    assert product.image_uri == "file:///only.jpg"


async def test_add_product_drops_blank_image_entries(store):
    product_id = await store.add_product(make_product(images=["", "file:///a.jpg", "   "]))

    product = await store.get_product(product_id)
    assert product.images == ["file:///a.jpg"]
    assert product.image_uri == "file:///a.jpg"


async def test_add_product_with_empty_images_ignores_image_uri(store):
    product_id = await store.add_product(make_product(images=[], image_uri="file:///x.jpg"))

    product = await store.get_product(product_id)

    assert product.images == []
    assert product.image_uri is None
    assert await store.get_images(product_id) == []


async def test_add_product_sets_fields_and_timestamps(store):
    product_id = await store.add_product(
        make_product(discount_price=80, gst_slab=18, quantity=4, details="Steel")
    )

    product = await store.get_product(product_id)
    assert product.id == product_id
    assert product.discount_price == 80
    assert product.gst_slab == 18
    assert product.quantity == 4
    assert product.details == "Steel"
    assert product.image_uri is None
    assert product.images == []
    assert product.created_at is not None
    assert product.created_at == product.updated_at


async def test_get_missing_product_returns_none(store):
    assert await store.get_product(999) is None


async def test_update_without_images_keeps_gallery(store):
    product_id = await store.add_product(make_product(images=["file:///a.jpg", "file:///b.jpg"]))
    before = await store.get_product(product_id)

    await store.update_product(ProductUpdate(id=product_id, name="Widget XL", category="Tools", price=120))

    product = await store.get_product(product_id)
    assert product.name == "Widget XL"
    assert product.price == 120
    assert product.images == ["file:///a.jpg", "file:///b.jpg"]
    assert product.image_uri == "file:///a.jpg"
    assert product.updated_at >= before.updated_at


async def test_update_with_empty_images_clears_gallery(store):
    product_id = await store.add_product(make_product(images=["file:///a.jpg", "file:///b.jpg"]))

    await store.update_product(
        ProductUpdate(id=product_id, name="Widget", category="Tools", price=100, images=[])
    )

    product = await store.get_product(product_id)
    assert product.images == []
    assert product.image_uri is None
    assert await store.get_images(product_id) == []


async def test_update_with_new_images_replaces_gallery(store):
    product_id = await store.add_product(make_product(images=["file:///a.jpg", "file:///b.jpg"]))

    await store.update_product(
        ProductUpdate(id=product_id, name="Widget", category="Tools", price=100, images=["file:///z.jpg"])
    )

    product = await store.get_product(product_id)
    assert product.images == ["file:///z.jpg"]
    assert product.image_uri == "file:///z.jpg"


async def test_update_missing_product_raises(store):
    with pytest.raises(NotFoundError):
        await store.update_product(ProductUpdate(id=42, name="Ghost", category="Tools", price=1))


async def test_delete_product_removes_images(store):
    product_id = await store.add_product(make_product(images=["file:///a.jpg", "file:///b.jpg"]))

    await store.delete_product(product_id)

    assert await store.get_product(product_id) is None
    assert await store.get_images(product_id) == []


async def test_delete_missing_product_raises(store):
    with pytest.raises(NotFoundError):
        await store.delete_product(7)


async def test_search_is_case_insensitive_substring(store):
    await store.add_product(make_product(name="Widget"))
    await store.add_product(make_product(name="Gadget"))

    names = [p.name for p in await store.search_products("wid")]

    assert names == ["Widget"]


async def test_search_covers_category_and_details(store):
    await store.add_product(make_product(name="Hammer", category="Hardware"))
    await store.add_product(make_product(name="Apple", category="Fruit", details="Fresh from the GROVE"))

    assert [p.name for p in await store.search_products("hard")] == ["Hammer"]
    assert [p.name for p in await store.search_products("grove")] == ["Apple"]


async def test_search_treats_wildcards_literally(store):
    await store.add_product(make_product(name="100% Cotton"))
    await store.add_product(make_product(name="Linen"))

    assert [p.name for p in await store.search_products("%")] == ["100% Cotton"]


async def test_products_by_category(store):
    await store.add_product(make_product(name="Hammer", category="Tools"))
    await store.add_product(make_product(name="Apple", category="Fruit"))

    products = await store.get_products_by_category("Fruit")

    assert [p.name for p in products] == ["Apple"]


async def test_results_are_snapshots(store):
    product_id = await store.add_product(make_product())

    snapshot = (await store.get_all_products())[0]
    snapshot.name = "Changed locally"

    assert (await store.get_product(product_id)).name == "Widget"


async def test_pagination_most_recent_first(store):
    ids = [await store.add_product(make_product(name=f"Item {i}")) for i in range(5)]

    first_page = await store.get_products_page(limit=2, offset=0)
    second_page = await store.get_products_page(limit=2, offset=2)
    last_page = await store.get_products_page(limit=2, offset=4)

    assert [p.id for p in first_page] == [ids[4], ids[3]]
    assert [p.id for p in second_page] == [ids[2], ids[1]]
    assert [p.id for p in last_page] == [ids[0]]
    assert await store.get_total_product_count() == 5


async def test_updated_product_moves_to_first_page(store):
    first_id = await store.add_product(make_product(name="Old"))
    await store.add_product(make_product(name="New"))

    await store.update_product(ProductUpdate(id=first_id, name="Old", category="Tools", price=5))

    page = await store.get_products_page(limit=1)
    assert page[0].id == first_id


async def test_paginated_search(store):
    for i in range(3):
        await store.add_product(make_product(name=f"Widget {i}"))
    await store.add_product(make_product(name="Gadget"))

    page = await store.search_products_page("widget", limit=2, offset=0)

    assert [p.name for p in page] == ["Widget 2", "Widget 1"]
    assert await store.count_search_results("widget") == 3


async def test_sorting_options(store):
    await store.add_product(make_product(name="banana", category="Fruit", price=30))
    await store.add_product(make_product(name="Apple", category="Fruit", price=50, discount_price=40))
    await store.add_product(make_product(name="Chisel", category="Carpentry", price=10))

    async def names(option, query=None):
        return [p.name for p in await store.get_sorted_products(option, query)]

    assert await names(SortOption.NAME_ASC) == ["Apple", "banana", "Chisel"]
    assert await names(SortOption.NAME_DESC) == ["Chisel", "banana", "Apple"]
    assert await names(SortOption.PRICE_ASC) == ["Chisel", "banana", "Apple"]
    assert await names(SortOption.PRICE_DESC) == ["Apple", "banana", "Chisel"]
    assert await names(SortOption.CATEGORY) == ["Chisel", "Apple", "banana"]
    assert await names(SortOption.DISCOUNT) == ["Apple"]
    assert await names(SortOption.NAME_ASC, query="fruit") == ["Apple", "banana"]


def test_product_input_validation():
    with pytest.raises(ValidationError):
        ProductCreate(name="   ", category="Tools", price=10)
    with pytest.raises(ValidationError):
        ProductCreate(name="Widget", category="Tools", price=0)
    with pytest.raises(ValidationError):
        ProductCreate(name="Widget", category="Tools", price=10, discount_price=10)
    with pytest.raises(ValidationError):
        ProductCreate(name="Widget", category="Tools", price=10, quantity=-1)


async def test_gst_slab_is_advisory_by_default(store):
    product_id = await store.add_product(make_product(gst_slab=7))

    assert (await store.get_product(product_id)).gst_slab == 7


async def test_gst_slab_enforced_when_configured(tmp_path):
    store = CatalogStore(make_settings(tmp_path, ENFORCE_GST_SLABS=True))
    await store.init()
    try:
        with pytest.raises(InvalidGstSlabError):
            await store.add_product(make_product(gst_slab=7))
        product_id = await store.add_product(make_product(gst_slab=28))
        with pytest.raises(InvalidGstSlabError):
            await store.update_product(
                ProductUpdate(id=product_id, name="Widget", category="Tools", price=100, gst_slab=3)
            )
        assert await store.get_total_product_count() == 1
    finally:
        await store.close()


async def test_operations_require_initialization(settings):
    store = CatalogStore(settings)

    with pytest.raises(NotInitializedError):
        await store.get_all_products()

    await store.init()
    await store.close()

    with pytest.raises(NotInitializedError):
        await store.add_product(make_product())
