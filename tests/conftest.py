import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from app.models import (
    Brand,
    Campaign,
    Product,
    ProductColor,
    ProductColorImage,
    ProductColorSize,
    User,
)
from app.utils.token import create_access_token

# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session():
    """
    Creates a new, isolated in-memory database session for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        SQLModel.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_session():
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _create_user(session, **values):
    user = User(**values)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def _headers(user):
    token = create_access_token({"user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(db_session):
    return _create_user(db_session, name="Maria Souza", telefone="11987654321", cpf="12345678901")


@pytest.fixture
def other_customer(db_session):
    return _create_user(db_session, name="Joao Lima", telefone="21912345678", cpf="98765432100")


@pytest.fixture
def admin(db_session):
    return _create_user(db_session, name="Admin", telefone="1130000000", cpf="11111111111", role="admin")


@pytest.fixture
def customer_headers(customer):
    return _headers(customer)


@pytest.fixture
def other_headers(other_customer):
    return _headers(other_customer)


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


@pytest.fixture
def catalog(db_session):
    """
    An active campaign with two products. Shirt has variants priced 5 (P, red)
    and 7 (M, blue); Pants has one variant priced 9. Returns the ids.
    """
    now = datetime.utcnow()
    brand = Brand(nome="Marca Azul")
    red = ProductColor(name="Vermelho")
    blue = ProductColor(name="Azul")
    db_session.add_all([brand, red, blue])
    db_session.flush()

    campaign = Campaign(
        nome="Verao",
        gender_id=1,
        marca="Marca Azul",
        brand_id=brand.id,
        data_inicio=now - timedelta(days=1),
        data_fim=now + timedelta(days=30),
        status="ativo",
    )
    db_session.add(campaign)
    db_session.flush()

    shirt = Product(
        nome="Camiseta",
        campaign_id=campaign.id,
        brand_id=brand.id,
        preco=5,
        images=["products/camiseta.jpg", "products/camiseta-2.jpg"],
        thumbnails=["products/thumbs/camiseta.jpg"],
    )
    pants = Product(
        nome="Calca",
        campaign_id=campaign.id,
        brand_id=brand.id,
        preco=9,
        images=["products/calca.jpg"],
        thumbnails=["products/thumbs/calca.jpg"],
    )
    db_session.add_all([shirt, pants])
    db_session.flush()

    shirt_small = ProductColorSize(product_id=shirt.id, product_color_id=red.id, size="P", price=5)
    shirt_medium = ProductColorSize(product_id=shirt.id, product_color_id=blue.id, size="M", price=7)
    pants_small = ProductColorSize(product_id=pants.id, product_color_id=blue.id, size="P", price=9)
    db_session.add_all([
        shirt_small,
        shirt_medium,
        pants_small,
        ProductColorImage(product_id=shirt.id, product_color_id=red.id, image_path="products/camiseta-vermelha.jpg"),
    ])
    db_session.commit()

    return {
        "brand_id": brand.id,
        "campaign_id": campaign.id,
        "red_id": red.id,
        "blue_id": blue.id,
        "shirt_id": shirt.id,
        "pants_id": pants.id,
        "shirt_small_id": shirt_small.id,
        "shirt_medium_id": shirt_medium.id,
        "pants_small_id": pants_small.id,
    }


@pytest.fixture
def place_order(client, catalog, customer_headers):
    """Places an order as ``customer`` and returns its id."""
    def _place(items=None, headers=None, telefone="11987654321", observacoes=None):
        if items is None:
            items = [
                {"product_id": catalog["shirt_id"], "product_size_id": catalog["shirt_small_id"], "quantidade": 2, "cor": "Vermelho"},
                {"product_id": catalog["pants_id"], "product_size_id": catalog["pants_small_id"], "quantidade": 1, "cor": "Azul"},
            ]
        response = client.post(
            "/orders",
            json={"items": items, "telefone": telefone, "observacoes": observacoes},
            headers=headers or customer_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["order_id"]

    return _place
