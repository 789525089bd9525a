import pytest

PRODUCT = {"name": "Kopi Arabika", "description": "Biji kopi sangrai 250g", "price": 75000, "stock": 12}


@pytest.fixture()
def auth_headers(client):
    client.post(
        "/api/auth/register",
        json={"name": "Admin", "email": "admin@example.com", "password": "Secret123!"},
    )
    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "Secret123!"})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


def _add(client, headers, **overrides):
    body = {**PRODUCT, **overrides}
    return client.post("/api/product/add-product", json=body, headers=headers)


def test_add_product(client, auth_headers):
    response = _add(client, auth_headers, name="  Kopi Arabika  ")

    assert response.status_code == 201
    product = response.json()["data"]["product"]
    assert product["name"] == "Kopi Arabika"
    assert product["price"] == 75000
    assert product["stock"] == 12
    assert product["id"]


def test_product_routes_require_token(client):
    response = client.post("/api/product/add-product", json=PRODUCT)

    assert response.status_code == 401
    assert response.json() == {
        "message": "Not authenticated",
        "data": None,
        "status": "error",
        "status_code": 401,
    }


def test_product_routes_reject_bad_token(client):
    response = client.get(
        "/api/product/get-all-product",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"
    assert response.json()["status"] == "error"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "ab"},
        {"description": "x" * 501},
        {"price": -1},
        {"price": "100"},
        {"stock": 1.5},
    ],
)
def test_add_product_validation(client, auth_headers, overrides):
    response = _add(client, auth_headers, **overrides)

    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation failed:")


def test_get_edit_delete_product(client, auth_headers):
    product_id = _add(client, auth_headers).json()["data"]["product"]["id"]

    fetched = client.get(f"/api/product/get-product/{product_id}", headers=auth_headers)
    edited = client.put(
        f"/api/product/edit-product/{product_id}",
        json={"price": 80000},
        headers=auth_headers,
    )
    deleted = client.delete(f"/api/product/delete-product/{product_id}", headers=auth_headers)
    missing = client.get(f"/api/product/get-product/{product_id}", headers=auth_headers)

    assert fetched.status_code == 200
    assert fetched.json()["data"]["product"]["name"] == PRODUCT["name"]
    assert edited.status_code == 200
    assert edited.json()["data"]["product"]["price"] == 80000
    assert edited.json()["data"]["product"]["stock"] == PRODUCT["stock"]
    assert deleted.status_code == 200
    assert deleted.json()["data"]["product"]["id"] == product_id
    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found"


def test_edit_missing_product(client, auth_headers):
    response = client.put("/api/product/edit-product/999", json={"stock": 1}, headers=auth_headers)

    assert response.status_code == 404


def test_invalid_product_id(client, auth_headers):
    response = client.get("/api/product/get-product/abc", headers=auth_headers)

    assert response.status_code == 400


def test_list_products_sorting(client, auth_headers):
    first = _add(client, auth_headers, name="Produk Satu").json()["data"]["product"]["id"]
    second = _add(client, auth_headers, name="Produk Dua").json()["data"]["product"]["id"]

    newest = client.get("/api/product/get-all-product", headers=auth_headers).json()["data"]
    oldest = client.get("/api/product/get-all-product?sort=oldest", headers=auth_headers).json()["data"]
    invalid = client.get("/api/product/get-all-product?sort=random", headers=auth_headers)

    assert newest["total"] == 2
    assert [item["id"] for item in newest["products"]] == [second, first]
    assert [item["id"] for item in oldest["products"]] == [first, second]
    assert invalid.status_code == 400
