"""Customer management service - create, fetch and update customers."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from ..models import Customer
from .exceptions import CustomerNotFoundError, InvalidCustomerError
from .matching import (
    lookup_customer,
    normalize_email,
    normalize_phone,
    split_contact,
    NOT_PROVIDED,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def create_customer(*, name: str, phone: str = '', email: str = '') -> Customer:
    """
    Create a new customer with an empty points balance.

    Args:
        name: Customer name (required)
        phone: Phone number in any format
        email: Email address

    Returns:
        Created Customer instance

    Raises:
        InvalidCustomerError: If name is blank
    """
    name = (name or '').strip()
    if not name:
        raise InvalidCustomerError("Customer name is required")

    customer = Customer.objects.create(
        name=name,
        phone=normalize_phone(phone),
        email=normalize_email(email),
        rewards_points=0,
    )
    logger.info("Created customer %s (%s)", customer.name, customer.id)
    return customer


def get_customer_by_id(customer_id: UUID) -> Customer:
    """
    Fetch a customer by id.

    Raises:
        CustomerNotFoundError: If no such customer exists
    """
    try:
        return Customer.objects.get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError("Customer not found")


@transaction.atomic
def update_customer_contact(
    *,
    customer_id: UUID,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    email: Optional[str] = None,
) -> Customer:
    """
    Update a customer's name and contact details.

    Only the fields that are passed (not None) are changed.
    """
    customer = get_customer_by_id(customer_id)

    update_fields = ['updated_at']
    if name is not None:
        name = name.strip()
        if not name:
            raise InvalidCustomerError("Customer name is required")
        customer.name = name
        update_fields.append('name')
    if phone is not None:
        customer.phone = normalize_phone(phone)
        update_fields.append('phone')
    if email is not None:
        customer.email = normalize_email(email)
        update_fields.append('email')

    customer.save(update_fields=update_fields)
    return customer


def resolve_customer_for_order(*, name: str, contact: str) -> Optional[Customer]:
    """
    Find the customer an order belongs to, creating one when appropriate.

    An existing customer is returned when the lookup matches. When nothing
    matches and a contact was entered, a new customer account is created.
    A bare name with no match leaves the order without a customer.
    """
    customer = lookup_customer(name=name, contact=contact)
    if customer:
        return customer

    contact = (contact or '').strip()
    if not (name or '').strip() or not contact or contact == NOT_PROVIDED:
        return None

    phone, email = split_contact(contact)
    return create_customer(name=name, phone=phone, email=email)
