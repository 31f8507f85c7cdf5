from datetime import datetime, timedelta, timezone

from sqlmodel import select

from app.models import CartItem, Campaign, Product, ProductColor, ProductColorImage, ProductColorSize
from app.services import catalog_service


def _campaign_payload(**overrides):
    now = datetime.utcnow()
    payload = {
        "nome": "Inverno",
        "gender_id": 2,
        "marca": "Marca Azul",
        "data_inicio": (now - timedelta(days=1)).isoformat(),
        "data_fim": (now + timedelta(days=10)).isoformat(),
    }
    payload.update(overrides)
    return payload


def test_campaign_names_get_a_numeric_suffix(client, admin_headers):
    names = [
        client.post("/criar-campanha", json=_campaign_payload(), headers=admin_headers).json()["nome"]
        for _ in range(3)
    ]

    assert names == ["Inverno", "Inverno - 1", "Inverno - 2"]


def test_campaign_dates_must_be_ordered(client, admin_headers):
    now = datetime.utcnow()
    response = client.post(
        "/criar-campanha",
        json=_campaign_payload(data_inicio=now.isoformat(), data_fim=(now - timedelta(days=1)).isoformat()),
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_campaign_creation_requires_admin(client, customer_headers):
    response = client.post("/criar-campanha", json=_campaign_payload(), headers=customer_headers)
    assert response.status_code == 403


def test_active_campaign_listing(client, db_session, catalog):
    now = datetime.utcnow()
    db_session.add(Campaign(
        nome="Antiga",
        gender_id=1,
        marca="Marca Azul",
        data_inicio=now - timedelta(days=60),
        data_fim=now - timedelta(days=30),
    ))
    db_session.commit()

    everything = client.get("/campanhas").json()
    active = client.get("/campanhasStore").json()

    assert {c["nome"] for c in everything} == {"Verao", "Antiga"}
    assert [c["nome"] for c in active] == ["Verao"]
    assert next(c for c in everything if c["nome"] == "Antiga")["status"] == "not_started"


def test_campaign_products(client, catalog):
    response = client.get(f"/campanhas/{catalog['campaign_id']}/produtos")

    assert response.status_code == 200
    assert [p["nome"] for p in response.json()] == ["Camiseta", "Calca"]


def test_unknown_campaign(client):
    response = client.get("/campanhas/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Campaign not found"


def test_show_product_hides_unavailable_ones(client, db_session, catalog):
    campaign = db_session.get(Campaign, catalog["campaign_id"])
    campaign.status = "pausado"
    db_session.add(campaign)
    db_session.commit()

    hidden = client.get(f"/products/{catalog['shirt_id']}")
    any_state = client.get(f"/products/all/{catalog['shirt_id']}")

    assert hidden.status_code == 404
    assert hidden.json()["message"] == "Product unavailable"
    assert any_state.status_code == 200
    assert len(any_state.json()["color_sizes"]) == 2


def test_products_by_campaign(client, catalog):
    listed = client.get(f"/products?campanhaId={catalog['campaign_id']}").json()
    none = client.get("/products?campanhaId=999").json()

    assert len(listed) == 2
    assert none == []


def test_create_product_with_variants(client, db_session, catalog, admin_headers):
    response = client.post(
        "/products",
        json={
            "nome": "Jaqueta",
            "campaign_id": catalog["campaign_id"],
            "brand_id": catalog["brand_id"],
            "preco": 120,
            "images": ["products/jaqueta.jpg"],
            "colors": [
                {"id": catalog["red_id"], "sizes": [{"size": "P"}, {"size": "G", "price": 140}]},
            ],
            "color_images": [{"color_id": catalog["red_id"], "images": ["products/jaqueta-vermelha.jpg"]}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    product_id = response.json()["product"]["id"]
    prices = db_session.exec(
        select(ProductColorSize.size, ProductColorSize.price)
        .where(ProductColorSize.product_id == product_id)
        .order_by(ProductColorSize.id)
    ).all()
    assert [tuple(row) for row in prices] == [("P", 120), ("G", 140)]


def test_create_product_validates_references(client, db_session, catalog, admin_headers):
    response = client.post(
        "/products",
        json={
            "nome": "Jaqueta",
            "campaign_id": 999,
            "preco": 120,
            "colors": [{"id": 555, "sizes": [{"size": "P"}]}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"campaign_id", "colors.0.id"}
    assert len(db_session.exec(select(Product)).all()) == 2


def test_delete_product(client, db_session, catalog, admin_headers):
    response = client.delete(f"/products/{catalog['pants_id']}", headers=admin_headers)

    assert response.status_code == 200
    assert db_session.get(Product, catalog["pants_id"]) is None
    assert db_session.get(ProductColorSize, catalog["pants_small_id"]) is None


def test_deleting_an_ordered_product_leaves_the_order_readable(client, db_session, catalog, place_order, customer_headers, admin_headers):
    order_id = place_order()

    response = client.delete(f"/products/{catalog['pants_id']}", headers=admin_headers)

    assert response.status_code == 200
    assert db_session.get(Product, catalog["pants_id"]) is None
    body = client.get(f"/orders-user/{order_id}", headers=customer_headers).json()
    assert body["total"] == 10
    assert body["items"][1]["product_name"] == "Unavailable"


def test_brands_and_colors(client, catalog, admin_headers):
    created = client.post("/marcas", json={"nome": "Marca Verde"}, headers=admin_headers)

    assert created.status_code == 201
    assert [b["nome"] for b in client.get("/marcas").json()] == ["Marca Azul", "Marca Verde"]
    assert client.get("/brands").json() == client.get("/marcas").json()
    assert [c["name"] for c in client.get("/product-colors").json()] == ["Vermelho", "Azul"]


def test_mixed_timezone_campaign_dates_are_stored_as_utc(client, admin_headers):
    response = client.post(
        "/criar-campanha",
        json=_campaign_payload(data_inicio="2025-01-01T00:00:00Z", data_fim="2025-02-01T00:00:00"),
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["data_inicio"] == "2025-01-01T00:00:00"


def test_offset_dates_are_compared_in_utc(client, admin_headers):
    # 00:00 at -03:00 is 03:00 UTC, after the naive 02:00 end
    response = client.post(
        "/criar-campanha",
        json=_campaign_payload(data_inicio="2025-01-10T00:00:00-03:00", data_fim="2025-01-10T02:00:00"),
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_campaign_activity_with_aware_dates():
    now = datetime.now(timezone.utc)
    campaign = Campaign(
        nome="Aware",
        gender_id=1,
        marca="Marca Azul",
        data_inicio=now - timedelta(days=1),
        data_fim=now + timedelta(days=1),
    )

    assert campaign.is_active()
    assert not campaign.is_active(now + timedelta(days=2))


def _shirt_update(catalog, **overrides):
    payload = {
        "nome": "Camiseta Basica",
        "colors": [
            {
                "id": catalog["red_id"],
                "sizes": [{"id": catalog["shirt_small_id"], "size": "P", "price": 6}, {"size": "G"}],
            },
        ],
        "color_images": [{"color_id": catalog["blue_id"], "images": ["products/camiseta-azul.jpg"]}],
    }
    payload.update(overrides)
    return payload


def test_update_product_replaces_variants_and_images(client, db_session, catalog, admin_headers):
    response = client.put(f"/products/{catalog['shirt_id']}", json=_shirt_update(catalog), headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Product updated successfully!"
    assert body["product"]["nome"] == "Camiseta Basica"

    variants = db_session.exec(
        select(ProductColorSize)
        .where(ProductColorSize.product_id == catalog["shirt_id"])
        .order_by(ProductColorSize.id)
    ).all()
    assert [(v.size, v.price) for v in variants] == [("P", 6), ("G", 5)]
    assert variants[0].id == catalog["shirt_small_id"]
    assert db_session.get(ProductColorSize, catalog["shirt_medium_id"]) is None

    images = db_session.exec(
        select(ProductColorImage.image_path).where(ProductColorImage.product_id == catalog["shirt_id"])
    ).all()
    assert images == ["products/camiseta-azul.jpg"]


def test_update_product_keeps_ordered_variant_prices_live(client, catalog, place_order, customer_headers, admin_headers):
    order_id = place_order()

    client.put(f"/products/{catalog['shirt_id']}", json=_shirt_update(catalog), headers=admin_headers)

    body = client.get(f"/orders-user/{order_id}", headers=customer_headers).json()
    assert body["total"] == 2 * 6 + 1 * 9


def test_update_product_drops_cart_lines_of_removed_variants(client, db_session, catalog, customer_headers, admin_headers):
    client.post(
        "/cart/add",
        json={"product_id": catalog["shirt_id"], "product_size_id": catalog["shirt_medium_id"], "quantidade": 1},
        headers=customer_headers,
    )

    client.put(f"/products/{catalog['shirt_id']}", json=_shirt_update(catalog), headers=admin_headers)

    assert db_session.exec(select(CartItem)).all() == []


def test_partial_update_leaves_variants_alone(client, db_session, catalog, admin_headers):
    response = client.put(f"/products/{catalog['shirt_id']}", json={"preco": 8}, headers=admin_headers)

    assert response.status_code == 200
    product = db_session.get(Product, catalog["shirt_id"])
    assert (product.nome, product.preco) == ("Camiseta", 8)
    assert len(db_session.exec(
        select(ProductColorSize).where(ProductColorSize.product_id == catalog["shirt_id"])
    ).all()) == 2


def test_update_product_rejects_variant_of_another_product(client, db_session, catalog, admin_headers):
    payload = _shirt_update(catalog, colors=[
        {"id": catalog["blue_id"], "sizes": [{"id": catalog["pants_small_id"], "size": "P"}]},
    ])

    response = client.put(f"/products/{catalog['shirt_id']}", json=payload, headers=admin_headers)

    assert response.status_code == 422
    assert "colors.0.sizes.0.id" in response.json()["errors"]
    assert db_session.get(Product, catalog["shirt_id"]).nome == "Camiseta"


def test_failed_product_update_rolls_back(client, db_session, catalog, admin_headers, monkeypatch):
    def failing_images(session, product_id, color_images):
        raise RuntimeError("storage offline")

    monkeypatch.setattr(catalog_service, "_add_color_images", failing_images)

    response = client.put(f"/products/{catalog['shirt_id']}", json=_shirt_update(catalog), headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["message"] == "Error updating product: storage offline"
    assert db_session.get(Product, catalog["shirt_id"]).nome == "Camiseta"
    assert db_session.get(ProductColorSize, catalog["shirt_medium_id"]) is not None
    assert len(db_session.exec(select(ProductColorImage)).all()) == 1


def test_unknown_product_update(client, admin_headers):
    response = client.put("/products/999", json={"nome": "Nada"}, headers=admin_headers)
    assert response.status_code == 404


def test_update_color(client, catalog, admin_headers):
    renamed = client.put(f"/product-colors/{catalog['red_id']}", json={"name": "Carmim"}, headers=admin_headers)
    clash = client.put(f"/product-colors/{catalog['red_id']}", json={"name": "Azul"}, headers=admin_headers)

    assert renamed.status_code == 200
    assert client.get(f"/product-colors/{catalog['red_id']}").json()["name"] == "Carmim"
    assert clash.status_code == 422
    assert "name" in clash.json()["errors"]


def test_delete_color_detaches_variants(client, db_session, catalog, admin_headers):
    response = client.delete(f"/product-colors/{catalog['red_id']}", headers=admin_headers)

    assert response.status_code == 204
    assert db_session.get(ProductColor, catalog["red_id"]) is None
    assert db_session.get(ProductColorSize, catalog["shirt_small_id"]).product_color_id is None
    assert db_session.exec(select(ProductColorImage)).all() == []
    assert client.get(f"/product-colors/{catalog['red_id']}").status_code == 404


def test_color_changes_require_admin(client, catalog, customer_headers):
    assert client.put(
        f"/product-colors/{catalog['red_id']}", json={"name": "Carmim"}, headers=customer_headers
    ).status_code == 403
    assert client.delete(f"/product-colors/{catalog['red_id']}", headers=customer_headers).status_code == 403


def test_recommended_products_by_gender(client, catalog):
    male = client.get("/products/recommended/1").json()
    female = client.get("/products/recommended/2").json()

    assert {p["nome"] for p in male} == {"Camiseta", "Calca"}
    assert female == []


def test_product_sales(client, catalog, place_order, admin_headers):
    place_order()

    response = client.get("/products/sales", headers=admin_headers)

    assert response.status_code == 200
    by_name = {p["nome"]: p for p in response.json()}
    assert by_name["Camiseta"]["sales"] == 2
    assert by_name["Calca"]["sales"] == 1
    assert set(by_name["Camiseta"]["colors"]) == {"Vermelho", "Azul"}
    assert by_name["Camiseta"]["campaign"] == {"nome": "Verao", "marca": "Marca Azul"}
