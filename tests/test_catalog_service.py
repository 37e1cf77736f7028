import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from vendorhub.core.exceptions import ResourceNotFoundError, StorageError, UpdateFailedError, ValidationError
from vendorhub.models.catalog import PRODUCT, SERVICE
from vendorhub.services.attachment_service import StoredHandles
from vendorhub.services.catalog_service import CatalogService

PRODUCT_FIELDS = {
    "productName": "Chair",
    "productDescription": "Wooden chair",
    "productCategory": "Furniture",
    "productSubcategory": "Seating",
    "price": "49.99",
    "stockAvailability": "12",
    "productPolicies": "No returns",
}


@pytest.fixture
def products(fake_db):
    return CatalogService(fake_db["products"], PRODUCT)


@pytest.fixture
def services(fake_db):
    return CatalogService(fake_db["services"], SERVICE)


@pytest.mark.asyncio
async def test_create_stores_owner_fields_and_handles(products, fake_db, alice):
    handles = StoredHandles(images=[ObjectId(), ObjectId()], videos=[ObjectId()])

    record_id = await products.create(alice["_id"], PRODUCT_FIELDS, handles)

    stored = fake_db["products"].documents[0]
    assert stored["_id"] == record_id
    assert stored["userId"] == alice["_id"]
    assert stored["productName"] == "Chair"
    assert stored["images"] == handles.images
    assert stored["videos"] == handles.videos


@pytest.mark.asyncio
async def test_create_surfaces_storage_failure(products, fake_db, alice, monkeypatch):
    async def broken_insert(document):
        raise PyMongoError("write concern error")

    monkeypatch.setattr(fake_db["products"], "insert_one", broken_insert)

    with pytest.raises(StorageError):
        await products.create(alice["_id"], PRODUCT_FIELDS)


@pytest.mark.asyncio
async def test_list_products_only_returns_own(products, alice, bob):
    await products.create(alice["_id"], PRODUCT_FIELDS)
    await products.create(alice["_id"], {**PRODUCT_FIELDS, "productName": "Table"})
    await products.create(bob["_id"], PRODUCT_FIELDS)

    records = await products.list_by_owner(alice["_id"])

    assert sorted(r["productName"] for r in records) == ["Chair", "Table"]


@pytest.mark.asyncio
async def test_empty_product_listing_is_an_empty_list(products, alice):
    assert await products.list_by_owner(alice["_id"]) == []


@pytest.mark.asyncio
async def test_empty_service_listing_is_not_found(services, alice):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await services.list_by_owner(alice["_id"])
    assert exc_info.value.message == "No services found"


@pytest.mark.asyncio
async def test_get_by_id_hides_other_owners_records(products, alice, bob):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(ResourceNotFoundError) as foreign:
        await products.get_by_id(str(record_id), bob["_id"])
    with pytest.raises(ResourceNotFoundError) as missing:
        await products.get_by_id(str(ObjectId()), bob["_id"])

    assert foreign.value.message == missing.value.message
    assert foreign.value.status_code == missing.value.status_code == 404


@pytest.mark.asyncio
async def test_get_by_malformed_id_is_not_found(products, alice):
    with pytest.raises(ResourceNotFoundError):
        await products.get_by_id("xyz", alice["_id"])


@pytest.mark.asyncio
async def test_update_one_field_preserves_others(products, alice):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    await products.update(str(record_id), alice["_id"], {"price": "39.99"})

    record = await products.get_by_id(str(record_id), alice["_id"])
    assert record["price"] == "39.99"
    for name, value in PRODUCT_FIELDS.items():
        if name != "price":
            assert record[name] == value
    assert record["userId"] == alice["_id"]


@pytest.mark.asyncio
async def test_update_with_identical_values_fails(products, alice):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(UpdateFailedError) as exc_info:
        await products.update(str(record_id), alice["_id"], {"productName": "Chair"})
    assert exc_info.value.message == "Product update failed"


@pytest.mark.asyncio
async def test_update_with_no_fields_fails(products, alice):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(UpdateFailedError):
        await products.update(str(record_id), alice["_id"], {})


@pytest.mark.asyncio
async def test_update_ignores_owner_field(products, alice, bob):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(UpdateFailedError):
        await products.update(str(record_id), alice["_id"], {"userId": bob["_id"]})

    record = await products.get_by_id(str(record_id), alice["_id"])
    assert record["userId"] == alice["_id"]


@pytest.mark.asyncio
async def test_update_replaces_attachment_lists(products, alice):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS, StoredHandles(images=[ObjectId()]))
    new_image = ObjectId()

    await products.update(str(record_id), alice["_id"], {"images": [str(new_image)]})

    record = await products.get_by_id(str(record_id), alice["_id"])
    assert record["images"] == [new_image]
    assert record["videos"] == []


@pytest.mark.asyncio
async def test_update_rejects_attachment_lists_with_bad_ids(products, alice):
    original_image = ObjectId()
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS, StoredHandles(images=[original_image]))

    with pytest.raises(ValidationError) as exc_info:
        await products.update(
            str(record_id), alice["_id"], {"images": [str(ObjectId()), "not-a-handle", "../etc/passwd"]}
        )
    assert exc_info.value.status_code == 422
    assert exc_info.value.details == {"field": "images", "value": "not-a-handle"}

    record = await products.get_by_id(str(record_id), alice["_id"])
    assert record["images"] == [original_image]


@pytest.mark.asyncio
async def test_update_foreign_record_is_not_found(products, alice, bob):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await products.update(str(record_id), bob["_id"], {"price": "1"})
    assert exc_info.value.message == "Product not found or not authorized to edit"


@pytest.mark.asyncio
async def test_delete_foreign_record_leaves_it_untouched(products, fake_db, alice, bob):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    with pytest.raises(ResourceNotFoundError):
        await products.delete(str(record_id), bob["_id"])

    assert len(fake_db["products"].documents) == 1
    assert fake_db["products"].documents[0]["productName"] == "Chair"


@pytest.mark.asyncio
async def test_delete_own_record(products, fake_db, alice):
    record_id = await products.create(alice["_id"], PRODUCT_FIELDS)

    await products.delete(str(record_id), alice["_id"])

    assert fake_db["products"].documents == []


@pytest.mark.asyncio
async def test_service_crud(services, alice):
    record_id = await services.create(alice["_id"], {"serviceName": "Catering", "location": "Austin"})

    await services.update(str(record_id), alice["_id"], {"location": "Dallas"})

    records = await services.list_by_owner(alice["_id"])
    assert len(records) == 1
    assert records[0]["serviceName"] == "Catering"
    assert records[0]["location"] == "Dallas"
