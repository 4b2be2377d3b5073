# app/services/address_service.py
from typing import List

from sqlalchemy.orm import Session

from app.data.database import transaction
from app.data.models.customer import ShippingAddressModel
from app.domain.errors import NotFoundError
from app.domain.schemas import AddressIn
from app.repos.customer_repo import AddressRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """A user has at most one default address; the first one saved becomes it."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: int) -> List[ShippingAddressModel]:
        return self.repo.list_for_user(user_id)

    def add_address(self, user_id: int, payload: AddressIn) -> ShippingAddressModel:
        is_default = payload.is_default or not self.repo.list_for_user(user_id)

        with transaction(self.db):
            if is_default:
                self.repo.unset_default(user_id)
            address = self.repo.add(
                ShippingAddressModel(
                    user_id=user_id,
                    street_address=payload.street_address,
                    city=payload.city,
                    state=payload.state,
                    postal_code=payload.postal_code,
                    country=payload.country,
                    is_default=is_default,
                )
            )

        logger.info(f"User {user_id} saved address {address.id} (default={is_default})")
        return address

    def update_address(self, user_id: int, address_id: int, payload: AddressIn) -> ShippingAddressModel:
        address = self.repo.get_for_user(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")

        with transaction(self.db):
            if payload.is_default:
                self.repo.unset_default(user_id, except_id=address_id)
            address.street_address = payload.street_address
            address.city = payload.city
            address.state = payload.state
            address.postal_code = payload.postal_code
            address.country = payload.country
            #clearing the flag here would leave the user without a default
            address.is_default = payload.is_default or address.is_default

        return address

    def set_default(self, user_id: int, address_id: int) -> ShippingAddressModel:
        address = self.repo.get_for_user(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")

        with transaction(self.db):
            self.repo.unset_default(user_id, except_id=address_id)
            address.is_default = True

        return address

    def delete_address(self, user_id: int, address_id: int) -> None:
        address = self.repo.get_for_user(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")

        was_default = address.is_default
        with transaction(self.db):
            self.repo.delete(address)
            if was_default:
                remaining = self.repo.list_for_user(user_id)
                if remaining:
                    remaining[0].is_default = True

        logger.info(f"User {user_id} deleted address {address_id}")
