#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.customer import CustomerModel
from storefront.data.models.address import AddressModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "OrderModel",
    "OrderItemModel",
    "CustomerModel",
    "AddressModel",
]
