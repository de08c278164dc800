"""End-to-end tests of the HTTP API over in-memory adapters."""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from catalog_service.domain.models import CatalogConfiguration
from catalog_service.infrastructure.connection_manager import get_connection_manager
from catalog_service.main import create_app

PNG = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def client():
    config = CatalogConfiguration(
        cache_backend="memory", blob_backend="memory", max_product_images=2
    )
    with TestClient(create_app(config)) as test_client:
        yield test_client


def _product_payload(**overrides):
    payload = {
        "name": "Anvil 3000",
        "description": "A very heavy anvil",
        "price": "199.99",
        "sku": "ANV3000XYZ",
        "discount": "0.10",
        "stock": 7,
    }
    payload.update(overrides)
    return payload


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["cache"]["backend"] == "memory"
        assert body["cache_stats"]["ttl_seconds"] == 300.0
        assert "counters" in body["metrics"]

    def test_degraded_when_cache_is_down(self, client):
        get_connection_manager().cache_backend.available = False

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["cache"]["status"] == "unhealthy"


class TestBrands:
    def test_crud(self, client):
        created = client.post(
            "/api/v1/brands", json={"name": "Acme", "description": "Tools", "display_order": 0}
        )
        assert created.status_code == 201
        brand_id = created.json()["id"]
        assert created.json()["image_file_name"] == "default-brand.png"

        updated = client.put(
            f"/api/v1/brands/{brand_id}",
            json={"name": "Acme", "description": "Tools", "display_order": 5},
        )
        assert updated.json()["display_order"] == 5

        listed = client.get("/api/v1/brands").json()
        assert [b["display_order"] for b in listed] == [5]

        assert client.delete(f"/api/v1/brands/{brand_id}").status_code == 204
        assert client.get(f"/api/v1/brands/{brand_id}").status_code == 404

    def test_image_upload(self, client):
        brand_id = client.post("/api/v1/brands", json={"name": "Acme", "description": "T"}).json()[
            "id"
        ]

        response = client.put(
            f"/api/v1/brands/{brand_id}/image",
            content=PNG,
            headers={"content-type": "image/png"},
        )
        assert response.status_code == 200
        assert response.json()["image_file_name"].endswith(".png")

        response = client.put(
            f"/api/v1/brands/{brand_id}/image",
            content=b"hello",
            headers={"content-type": "text/plain"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_IMAGE"

        reset = client.delete(f"/api/v1/brands/{brand_id}/image")
        assert reset.json()["image_file_name"] == "default-brand.png"

    def test_invalid_payload(self, client):
        response = client.post("/api/v1/brands", json={"name": "", "description": "T"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestCategories:
    def test_subcategories(self, client):
        root = client.post("/api/v1/categories", json={"name": "Tools", "description": "T"}).json()
        child = client.post(
            "/api/v1/categories",
            json={"name": "Hammers", "description": "H", "parent_category_id": root["id"]},
        ).json()

        children = client.get(f"/api/v1/categories/{root['id']}/subcategories").json()
        assert [c["id"] for c in children] == [child["id"]]

        missing = client.get(f"/api/v1/categories/{uuid4()}/subcategories")
        assert missing.status_code == 404

    def test_unknown_parent(self, client):
        response = client.post(
            "/api/v1/categories",
            json={"name": "Orphan", "description": "O", "parent_category_id": str(uuid4())},
        )

        assert response.status_code == 404
        assert response.json()["error"]["details"]["field"] == "parent_category_id"


class TestProducts:
    def test_create_and_get(self, client):
        created = client.post("/api/v1/products", json=_product_payload())
        assert created.status_code == 201
        body = created.json()
        assert body["slug"] == "anvil-3000-anv3000xyz"
        assert body["images"] == []

        fetched = client.get(f"/api/v1/products/{body['id']}").json()
        assert fetched["sku"] == "ANV3000XYZ"

    def test_listing_is_paged(self, client):
        for index, name in enumerate(["Cedar", "alder", "Birch"]):
            client.post(
                "/api/v1/products", json=_product_payload(name=name, sku=f"WOOD00000{index}")
            )

        page = client.get("/api/v1/products", params={"page_size": 2}).json()

        assert [p["name"] for p in page["items"]] == ["alder", "Birch"]
        assert page["total_pages"] == 2
        assert page["total_count"] == 3

    def test_unknown_brand(self, client):
        response = client.post("/api/v1/products", json=_product_payload(brand_id=str(uuid4())))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BRAND_NOT_FOUND"

    def test_delete_publishes_event(self, client):
        product_id = client.post("/api/v1/products", json=_product_payload()).json()["id"]

        assert client.delete(f"/api/v1/products/{product_id}").status_code == 204

        events = get_connection_manager().event_publisher.events
        assert [str(event.product_id) for event in events] == [product_id]
        assert client.delete(f"/api/v1/products/{product_id}").status_code == 404


class TestProductImages:
    def _upload(self, client, product_id):
        return client.post(
            f"/api/v1/products/{product_id}/images",
            content=PNG,
            headers={"content-type": "image/png"},
        )

    def test_gallery(self, client):
        product_id = client.post("/api/v1/products", json=_product_payload()).json()["id"]

        first = self._upload(client, product_id).json()
        second = self._upload(client, product_id).json()
        assert (first["display_order"], second["display_order"]) == (0, 1)

        limited = self._upload(client, product_id)
        assert limited.status_code == 400
        assert limited.json()["error"]["code"] == "IMAGE_LIMIT_EXCEEDED"

        reordered = client.put(
            f"/api/v1/products/{product_id}/images/{first['id']}", json={"display_order": 1}
        ).json()
        assert [image["id"] for image in reordered] == [second["id"], first["id"]]

        product = client.get(f"/api/v1/products/{product_id}").json()
        assert [image["id"] for image in product["images"]] == [second["id"], first["id"]]

        deleted = client.delete(f"/api/v1/products/{product_id}/images/{second['id']}")
        assert deleted.status_code == 204
        remaining = client.get(f"/api/v1/products/{product_id}/images").json()
        assert [(i["id"], i["display_order"]) for i in remaining] == [(first["id"], 0)]

    def test_images_gone_with_product(self, client):
        product_id = client.post("/api/v1/products", json=_product_payload()).json()["id"]
        image = self._upload(client, product_id).json()
        image_url = f"/api/v1/products/{product_id}/images/{image['id']}"
        assert client.get(image_url).status_code == 200

        assert client.delete(f"/api/v1/products/{product_id}").status_code == 204

        response = client.get(image_url)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_image_of_another_product(self, client):
        owner = client.post("/api/v1/products", json=_product_payload()).json()["id"]
        other = client.post("/api/v1/products", json=_product_payload(sku="OTHER00001")).json()[
            "id"
        ]
        image = self._upload(client, owner).json()

        response = client.get(f"/api/v1/products/{other}/images/{image['id']}")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "IMAGE_PRODUCT_MISMATCH"
