from app.models.user import User
from app.models.campaign import Brand, Campaign
from app.models.product import Product, ProductColor, ProductColorSize, ProductColorImage
from app.models.cart import Cart, CartItem
from app.models.order_item import OrderItem
from app.models.order import Order

# add ALL models here
