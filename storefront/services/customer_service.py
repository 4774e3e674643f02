# storefront/services/customer_service.py
from sqlalchemy.orm import Session

from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CustomerOut, OrderOut, StatsOut
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CustomerService:
    """Admin customer console."""

    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)
        self.orders = OrderRepo(db)
        self.catalog = CatalogRepo(db)

    def list_customers(self, search: str | None = None) -> list[CustomerOut]:
        return [CustomerOut.model_validate(c) for c in self.repo.list_customers(search)]

    def order_history(self, customer_id: str) -> list[OrderOut]:
        customer = self.repo.get(customer_id)
        if not customer:
            raise NotFoundError("Customer not found")
        if not customer.phone:
            return []
        return [OrderOut.model_validate(o) for o in self.orders.list_by_phone(customer.phone)]

    def adjust_points(self, customer_id: str, amount: int) -> CustomerOut:
        """Manual bonus/penalty; the balance never goes below zero."""
        customer = self.repo.get(customer_id)
        if not customer:
            raise NotFoundError("Customer not found")

        before = customer.loyalty_points or 0
        customer.loyalty_points = max(0, before + amount)
        self.repo.save(customer)

        logger.info(f"Customer {customer_id} points {before} -> {customer.loyalty_points}")
        return CustomerOut.model_validate(customer)

    def stats(self) -> StatsOut:
        return StatsOut(
            categories=self.catalog.count_categories(),
            products=self.catalog.count_products(),
            orders=self.orders.count(),
        )
