# storefront/services/profile_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.customer import CustomerModel
from storefront.data.models.order import OrderModel
from storefront.domain.loyalty import points_for_spend, loyalty_summary
from storefront.domain.schemas import CustomerOut, ProfileOut
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.address_service import AddressService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProfileService:
    """
    Customer profile reconciliation.

    Spend and points are always re-derived from the full order history of the
    identity (user_id for accounts, phone for guests), never incremented, so
    running it twice for the same order changes nothing. The price is one
    aggregate query per reconciliation.
    """

    def __init__(self, db: Session):
        self.customers = CustomerRepo(db)
        self.orders = OrderRepo(db)
        self.addresses = AddressService(db)

    def reconcile(self, order: OrderModel) -> CustomerModel:
        try:
            customer, total_spent = self._lookup(order.user_id, order.phone)

            if customer:
                customer.total_spent = total_spent
                customer.loyalty_points = points_for_spend(total_spent)
                customer.full_name = order.full_name
                if order.email:
                    customer.email = order.email
                if not customer.phone:
                    customer.phone = order.phone
                logger.info(
                    f"Customer {customer.id} reconciled: spent {total_spent}, "
                    f"points {customer.loyalty_points}"
                )
            else:
                customer = self.customers.add(
                    CustomerModel(
                        user_id=order.user_id,
                        full_name=order.full_name,
                        phone=order.phone,
                        email=order.email,
                        total_spent=total_spent,
                        loyalty_points=points_for_spend(total_spent),
                    )
                )
                logger.info(f"New customer for order {order.id} ({order.user_id or order.phone})")

            if order.user_id and order.delivery_address:
                self.addresses.save_from_checkout(order.user_id, order.delivery_address, commit=False)

            self.customers.commit()
        except Exception:
            self.customers.rollback()
            raise

        return customer

    def reconcile_identity(self, user_id: str | None, phone: str) -> CustomerModel | None:
        """
        Re-aggregate the customer behind an identity once its orders are gone.
        Only an existing row is updated, nothing is created.
        """
        try:
            customer, total_spent = self._lookup(user_id, phone)
            if customer:
                customer.total_spent = total_spent
                customer.loyalty_points = points_for_spend(total_spent)
                self.customers.commit()
                logger.info(
                    f"Customer {customer.id} re-aggregated: spent {total_spent}, "
                    f"points {customer.loyalty_points}"
                )
        except Exception:
            self.customers.rollback()
            raise

        return customer

    def reset_all_totals(self) -> int:
        try:
            reset = self.customers.reset_all_totals()
            self.customers.commit()
        except Exception:
            self.customers.rollback()
            raise
        logger.info(f"Spend and points reset for {reset} customers")
        return reset

    def _lookup(self, user_id: str | None, phone: str) -> tuple[CustomerModel | None, Decimal]:
        if user_id:
            return self.customers.get_by_user_id(user_id), self.orders.sum_total_for_user(user_id)
        return self.customers.get_by_phone(phone), self.orders.sum_total_for_phone(phone)

    def ensure_account_customer(
        self,
        user_id: str,
        full_name: str,
        email: str | None = None,
        phone: str | None = None,
    ) -> CustomerModel:
        """Customer row created on account signup, if the account has none yet."""
        existing = self.customers.get_by_user_id(user_id)
        if existing:
            return existing

        customer = CustomerModel(
            user_id=user_id,
            full_name=full_name,
            email=email,
            phone=phone,
            total_spent=0,
            loyalty_points=0,
        )
        logger.info(f"Customer created for account {user_id}")
        return self.customers.save(customer)

    def get_profile(self, user_id: str) -> ProfileOut:
        customer = self.customers.get_by_user_id(user_id)
        points = customer.loyalty_points if customer else 0
        return ProfileOut(
            customer=CustomerOut.model_validate(customer) if customer else None,
            loyalty=loyalty_summary(points),
        )
