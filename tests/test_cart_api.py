from decimal import Decimal


def test_new_user_has_empty_cart(client, auth_headers, make_user):
    make_user("george")

    resp = client.get("/cart", headers=auth_headers("george"))

    assert resp.status_code == 200
    assert resp.json()["items"] == {}
    assert Decimal(resp.json()["total"]) == 0


def test_adding_same_product_twice_increments_quantity(client, auth_headers, make_user, make_product):
    make_user("george")
    product = make_product("Smart Watch", "79.99")

    first = client.post(f"/cart/products/{product.id}", headers=auth_headers("george"))
    second = client.post(f"/cart/products/{product.id}", headers=auth_headers("george"))

    assert first.status_code == 201
    assert second.status_code == 201
    item = second.json()["items"][str(product.id)]
    assert item["quantity"] == 2
    assert Decimal(item["discountPercent"]) == 0
    assert Decimal(item["lineTotal"]) == Decimal("159.98")
    assert item["product"]["name"] == "Smart Watch"
    assert Decimal(second.json()["total"]) == Decimal("159.98")


def test_add_unknown_product_is_not_found(client, auth_headers, make_user):
    make_user("george")

    resp = client.post("/cart/products/999", headers=auth_headers("george"))

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_update_quantity(client, auth_headers, make_user, make_product, put_in_cart):
    user = make_user("george")
    product = make_product("Mouse", "12.50")
    put_in_cart(user, product, 1)

    resp = client.put(f"/cart/products/{product.id}", json={"quantity": 4}, headers=auth_headers("george"))

    assert resp.status_code == 200
    assert resp.json()["items"][str(product.id)]["quantity"] == 4
    assert Decimal(resp.json()["total"]) == Decimal("50.00")


def test_update_rejects_non_positive_quantity(client, auth_headers, make_user, make_product, put_in_cart):
    user = make_user("george")
    product = make_product()
    put_in_cart(user, product, 1)

    resp = client.put(f"/cart/products/{product.id}", json={"quantity": 0}, headers=auth_headers("george"))

    assert resp.status_code == 422


def test_update_product_not_in_cart_is_not_found(client, auth_headers, make_user, make_product):
    make_user("george")
    product = make_product()

    resp = client.put(f"/cart/products/{product.id}", json={"quantity": 3}, headers=auth_headers("george"))

    assert resp.status_code == 404


def test_clear_cart(client, auth_headers, make_user, make_product, put_in_cart):
    user = make_user("george")
    put_in_cart(user, make_product("A", "1.00"), 3)
    put_in_cart(user, make_product("B", "2.00"), 1)

    resp = client.delete("/cart", headers=auth_headers("george"))

    assert resp.status_code == 202
    assert resp.json()["items"] == {}
    assert client.get("/cart", headers=auth_headers("george")).json()["items"] == {}


def test_cart_is_private_to_its_owner(client, auth_headers, make_user, make_product, put_in_cart):
    george = make_user("george")
    make_user("jane")
    put_in_cart(george, make_product(), 2)

    resp = client.get("/cart", headers=auth_headers("jane"))

    assert resp.json()["items"] == {}
