"""Customer matching: contact parsing, exact lookup and fuzzy name search."""

from typing import List, Optional, Tuple
import re

from fuzzywuzzy import fuzz

from ..models import Customer


# Thresholds for fuzzy matching
EXACT_MATCH_THRESHOLD = 100
HIGH_SIMILARITY_THRESHOLD = 90
MEDIUM_SIMILARITY_THRESHOLD = 80

# Minimum input length before the order form triggers a lookup
MIN_LOOKUP_LENGTH = 2

# Placeholder the order form stores when no contact was entered
NOT_PROVIDED = 'Not provided'


def normalize_name(name: str) -> str:
    """
    Normalize a customer name for comparison.

    Args:
        name: Name as typed by staff

    Returns:
        Lowercase name with collapsed whitespace and no punctuation
    """
    text = re.sub(r'[^\w\s-]', '', (name or '').lower())
    return re.sub(r'\s+', ' ', text).strip()


def normalize_phone(value: str) -> str:
    """Strip everything except digits."""
    return re.sub(r'\D', '', value or '')


def normalize_email(value: str) -> str:
    return (value or '').strip().lower()


def split_contact(contact: str) -> Tuple[str, str]:
    """
    Split the free-form "phone or email" field into (phone, email).

    Anything containing '@' is treated as an email, everything else as a
    phone number.
    """
    contact = (contact or '').strip()
    if not contact or contact == NOT_PROVIDED:
        return '', ''
    if '@' in contact:
        return '', normalize_email(contact)
    return normalize_phone(contact), ''


def find_customer(*, name: str = '', phone: str = '', email: str = '') -> Optional[Customer]:
    """
    Find an existing customer by phone, then email, then exact name.

    Phone is the most reliable key, so it is checked first.

    Args:
        name: Customer name
        phone: Phone number in any format
        email: Email address

    Returns:
        The first matching Customer or None
    """
    phone = normalize_phone(phone)
    if phone:
        customer = Customer.objects.filter(phone=phone).order_by('created_at').first()
        if customer:
            return customer

    email = normalize_email(email)
    if email:
        customer = Customer.objects.filter(email=email).order_by('created_at').first()
        if customer:
            return customer

    name_norm = normalize_name(name)
    if name_norm:
        customer = Customer.objects.filter(name_normalized=name_norm).order_by('created_at').first()
        if customer:
            return customer

    return None


def lookup_customer(*, name: str = '', contact: str = '') -> Optional[Customer]:
    """
    Look up a customer the way the order form does while staff type.

    No lookup happens when both inputs are blank, or when neither input is at
    least two characters long. A name with a contact searches on all keys;
    a name alone searches by name; a contact alone searches by phone/email.
    """
    name = (name or '').strip()
    contact = (contact or '').strip()
    if contact == NOT_PROVIDED:
        contact = ''

    if not name and not contact:
        return None
    if len(name) < MIN_LOOKUP_LENGTH and len(contact) < MIN_LOOKUP_LENGTH:
        return None

    phone, email = split_contact(contact)
    if name and contact:
        return find_customer(name=name, phone=phone, email=email)
    if name:
        return find_customer(name=name)
    return find_customer(phone=phone, email=email)


def score_names(left: str, right: str) -> int:
    """Similarity (0-100) of two already-normalized names."""
    if left == right:
        return EXACT_MATCH_THRESHOLD
    return fuzz.ratio(left, right)


def find_similar_customers(
    *,
    name: str,
    threshold: int = MEDIUM_SIMILARITY_THRESHOLD,
    customers=None,
) -> List[Tuple[Customer, int]]:
    """
    Find customers whose name is similar to the given one.

    Args:
        name: Name to search for
        threshold: Minimum similarity score (0-100)
        customers: Optional iterable of candidates (defaults to all customers)

    Returns:
        Up to 10 (customer, score) tuples, best match first
    """
    name_norm = normalize_name(name)
    if not name_norm:
        return []

    if customers is None:
        customers = Customer.objects.all()

    candidates = []
    for customer in customers:
        score = score_names(name_norm, customer.name_normalized)
        if score >= threshold:
            candidates.append((customer, score))

    candidates.sort(key=lambda x: x[1], reverse=True)

    return candidates[:10]
