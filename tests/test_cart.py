from sqlmodel import select

from app.models import CartItem


def _add(client, headers, catalog, quantidade=1, cor="Vermelho", variant="shirt_small_id"):
    return client.post(
        "/cart/add",
        json={
            "product_id": catalog["shirt_id"],
            "product_size_id": catalog[variant],
            "quantidade": quantidade,
            "cor": cor,
        },
        headers=headers,
    )


def test_empty_cart(client, customer_headers):
    response = client.get("/cart", headers=customer_headers)

    assert response.status_code == 200
    assert response.json() == {"items": [], "total": 0}


def test_add_same_line_twice_merges_quantity(client, db_session, catalog, customer_headers):
    first = _add(client, customer_headers, catalog)
    second = _add(client, customer_headers, catalog)

    assert first.status_code == 201
    assert first.json()["message"] == "Product added to cart!"
    assert second.status_code == 201

    rows = db_session.exec(select(CartItem)).all()
    assert len(rows) == 1
    assert rows[0].quantidade == 2


def test_different_color_or_variant_is_a_new_line(client, db_session, catalog, customer_headers):
    _add(client, customer_headers, catalog, cor="Vermelho")
    _add(client, customer_headers, catalog, cor="Azul")
    _add(client, customer_headers, catalog, cor=None)
    _add(client, customer_headers, catalog, cor=None)
    _add(client, customer_headers, catalog, variant="shirt_medium_id")

    rows = db_session.exec(select(CartItem).order_by(CartItem.id)).all()
    assert len(rows) == 4
    assert [r.quantidade for r in rows] == [1, 1, 2, 1]


def test_cart_totals_use_variant_prices(client, catalog, customer_headers):
    _add(client, customer_headers, catalog, quantidade=2)
    _add(client, customer_headers, catalog, quantidade=1, variant="shirt_medium_id", cor="Azul")

    body = client.get("/cart", headers=customer_headers).json()

    assert [line["subtotal"] for line in body["items"]] == [10, 7]
    assert body["total"] == 17
    assert body["items"][0]["color_image"] == "products/camiseta-vermelha.jpg"
    assert body["items"][1]["color_image"] == "products/camiseta.jpg"
    assert body["items"][0]["size"] == "P"


def test_add_rejects_unknown_references(client, customer_headers):
    response = client.post(
        "/cart/add",
        json={"product_id": 1234, "product_size_id": 5678, "quantidade": 1},
        headers=customer_headers,
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"product_id", "product_size_id"}


def test_add_rejects_zero_quantity(client, catalog, customer_headers):
    response = _add(client, customer_headers, catalog, quantidade=0)

    assert response.status_code == 422
    assert "quantidade" in response.json()["errors"]


def test_update_and_remove_line(client, db_session, catalog, customer_headers):
    _add(client, customer_headers, catalog)
    item_id = db_session.exec(select(CartItem.id)).first()

    updated = client.put("/cart/update", json={"item_id": item_id, "quantidade": 5}, headers=customer_headers)
    assert updated.status_code == 200
    assert db_session.get(CartItem, item_id).quantidade == 5

    removed = client.request("DELETE", "/cart/remove", json={"item_id": item_id}, headers=customer_headers)
    assert removed.status_code == 200
    assert db_session.get(CartItem, item_id) is None


def test_cart_lines_are_scoped_to_their_owner(client, db_session, catalog, customer_headers, other_headers):
    _add(client, customer_headers, catalog)
    item_id = db_session.exec(select(CartItem.id)).first()

    updated = client.put("/cart/update", json={"item_id": item_id, "quantidade": 9}, headers=other_headers)
    removed = client.request("DELETE", "/cart/remove", json={"item_id": item_id}, headers=other_headers)

    assert updated.status_code == 404
    assert removed.status_code == 404
    assert db_session.get(CartItem, item_id).quantidade == 1
    assert client.get("/cart", headers=other_headers).json()["items"] == []


def test_clear_cart_only_touches_own_lines(client, db_session, catalog, customer_headers, other_headers):
    _add(client, customer_headers, catalog)
    _add(client, other_headers, catalog)

    response = client.delete("/cart/clear", headers=customer_headers)

    assert response.status_code == 200
    assert client.get("/cart", headers=customer_headers).json()["items"] == []
    assert len(client.get("/cart", headers=other_headers).json()["items"]) == 1


def test_placing_an_order_leaves_the_cart_alone(client, catalog, customer_headers, place_order):
    _add(client, customer_headers, catalog)
    place_order()

    assert len(client.get("/cart", headers=customer_headers).json()["items"]) == 1
