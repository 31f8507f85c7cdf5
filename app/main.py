from fastapi import FastAPI
from app.database import create_db_and_tables
from app.config import settings
from app.core.error_handlers import setup_error_handlers
from app.logging_config import configure_logging
from app.routes import (
    admin_orders,
    auth,
    campaigns,
    cart,
    health,
    orders,
    products,
    users,
)

from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local, alembic owns the schema elsewhere
    if settings.ENV == "local":
        create_db_and_tables()
        logger.info("Local database tables created")
    yield

app = FastAPI(title="Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)

app.include_router(auth.router, tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Customers"])
app.include_router(campaigns.router, tags=["Campaigns"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(orders.router, tags=["Orders"])
app.include_router(admin_orders.router, tags=["Admin Orders"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/register", "/login", "/logout", "/me"],
        "catalog_endpoints": [
            "/campanhas", "/campanhasStore", "/campanhas/{id}", "/campanhas/{id}/produtos",
            "/products", "/products/all", "/products/{id}", "/products/recommended/{genderId}",
            "/products/sales", "/product-colors", "/product-colors/{id}", "/marcas"
        ],
        "cart": ["/cart", "/cart/add", "/cart/update", "/cart/remove", "/cart/clear"],
        "orders": [
            "/orders", "/orders-user-list", "/orders-user/{id}",
            "/orders/{id}/cancel", "/orders/{id}/items/{itemId}/cancel"
        ],
        "admin_orders": [
            "/orders", "/pedidos/{id}", "/pedidos/{orderId}/produtos/{itemId}/status",
            "/notificar-pagamento", "/marcar-processados", "/campaigns"
        ],
        "customers": ["/users", "/users/{id}", "/users/{id}/pedidos"],
    }
