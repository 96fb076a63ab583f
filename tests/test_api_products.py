import pytest

SEAL_A = {"title": "Seal A", "size": "10x20x5", "material": "NBR", "fits": "X", "sku": "SKU-1"}


@pytest.fixture
def create(client, admin_headers):
    def _create(**overrides):
        return client.post("/api/products", json={**SEAL_A, **overrides}, headers=admin_headers)
    return _create


def test_duplicate_sku_is_rejected(client, create):
    first = create()
    assert first.status_code == 201
    product = first.json()["product"]
    assert product["in_stock"] is True
    assert "price" not in product

    second = create(title="Seal A copy", material="FKM")
    assert second.status_code == 409
    assert second.json()["error"] == "Product with SKU SKU-1 already exists"

    stored = client.get(f"/api/products/{product['id']}").json()["product"]
    assert stored == product


def test_writes_need_admin_token(client, create):
    assert client.post("/api/products", json=SEAL_A).status_code == 401
    product_id = create().json()["product"]["id"]
    assert client.put(f"/api/products/{product_id}", json={"title": "x"}).status_code == 401
    assert client.delete(f"/api/products/{product_id}").status_code == 401


def test_invalid_product_is_rejected(client, admin_headers, fake_db):
    res = client.post("/api/products", json={**SEAL_A, "sku": "", "price": -5}, headers=admin_headers)
    assert res.status_code == 400
    assert {e["field"] for e in res.json()["errors"]} == {"sku", "price"}
    assert fake_db.tables.get("products", []) == []


def test_reads_are_idempotent(client, create):
    product_id = create().json()["product"]["id"]
    first = client.get(f"/api/products/{product_id}")
    second = client.get(f"/api/products/{product_id}")
    assert first.status_code == 200
    assert first.json() == second.json()


def test_lookup_by_sku_and_missing(client, create):
    create()
    assert client.get("/api/products/sku/SKU-1").json()["product"]["title"] == "Seal A"
    assert client.get("/api/products/sku/NOPE").status_code == 404
    assert client.get("/api/products/missing").status_code == 404


def test_list_search_and_category(client, create):
    create(category="Kick Seals", fits="Honda Activa")
    create(sku="SKU-2", title="Fork Seal", category="Front Fork Seals", fits="Hero Splendor")

    listing = client.get("/api/products").json()
    assert listing["total"] == 2
    assert [p["sku"] for p in listing["products"]] == ["SKU-2", "SKU-1"]

    assert [p["sku"] for p in client.get("/api/products?search=splendor").json()["products"]] == ["SKU-2"]
    assert [p["sku"] for p in client.get("/api/products?category=Kick Seals").json()["products"]] == ["SKU-1"]
    assert client.get("/api/products?category=Brake Seals").json() == {"products": [], "total": 0}


def test_update_product(client, create, admin_headers):
    product = create().json()["product"]
    create(sku="SKU-2")

    res = client.put(f"/api/products/{product['id']}", json={"price": 12.5}, headers=admin_headers)
    assert res.status_code == 200
    updated = res.json()["product"]
    assert updated["price"] == 12.5
    assert updated["title"] == "Seal A"
    assert updated["created_at"] == product["created_at"]

    clash = client.put(f"/api/products/{product['id']}", json={"sku": "SKU-2"}, headers=admin_headers)
    assert clash.status_code == 409
    assert client.put("/api/products/missing", json={"title": "x"}, headers=admin_headers).status_code == 404
    assert client.put(f"/api/products/{product['id']}", json={"title": ""}, headers=admin_headers).status_code == 400


def test_delete_product(client, create, admin_headers):
    product_id = create().json()["product"]["id"]
    res = client.delete(f"/api/products/{product_id}", headers=admin_headers)
    assert res.status_code == 204
    assert res.content == b""
    assert client.get(f"/api/products/{product_id}").status_code == 404
    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 404


def test_products_unavailable_without_supabase(file_client):
    res = file_client.get("/api/products")
    assert res.status_code == 500
    assert res.json() == {"ok": False, "error": "Products store is not configured"}


def test_store_failure_is_not_leaked(client, fake_db):
    fake_db.fail = True
    res = client.get("/api/products")
    assert res.status_code == 500
    assert "connection refused" not in res.text


def test_seed_catalogue(client, admin_headers):
    first = client.post("/api/admin/seed", headers=admin_headers).json()
    assert first["seeded"] == 7
    assert first["skipped"] == 0
    assert client.post("/api/admin/seed", headers=admin_headers).json() == {"seeded": 0, "skipped": 7}

    kick = client.get("/api/products/sku/SBO-KS-13824505").json()["product"]
    assert kick["category"] == "Kick Seals"


def test_non_uuid_id_is_not_found(client, create, admin_headers):
    create()
    assert client.get("/api/products/abc").status_code == 404
    assert client.put("/api/products/abc", json={"title": "x"}, headers=admin_headers).status_code == 404
    assert client.delete("/api/products/abc", headers=admin_headers).status_code == 404
    assert client.get("/api/products/abc").json() == {"ok": False, "error": "Product not found"}
