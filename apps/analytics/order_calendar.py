"""
Order calendar.

Pure functions over an in-memory list of orders that back the calendar
screen: grouping by date, period bounds and stats, the month grid, the year
overview and the day list.

Orders only need ``delivery_date``, ``delivery_time``, ``customer_name``,
``final_total``, ``payment_status`` and ``items`` (with ``name``), so
prefetch items before passing a queryset in.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal

from apps.orders.models import PaymentStatus
from .exceptions import InvalidViewError


DAY = 'Day'
WEEK = 'Week'
MONTH = 'Month'
YEAR = 'Year'

VIEWS = [DAY, WEEK, MONTH, YEAR]

GRID_CELLS = 42


def parse_view(value):
    """Return the canonical view name, case-insensitively. Defaults to Month."""
    if not value:
        return MONTH
    for view in VIEWS:
        if view.lower() == str(value).strip().lower():
            return view
    raise InvalidViewError(f"Invalid view: '{value}'. Use one of {', '.join(VIEWS)}")


def _items(order):
    items = order.items
    return items.all() if hasattr(items, 'all') else items


def matches_search(order, search):
    """True when the customer name or any item name contains ``search``."""
    if not search:
        return True
    needle = search.strip().lower()
    if needle in (order.customer_name or '').lower():
        return True
    return any(needle in (item.name or '').lower() for item in _items(order))


def orders_by_date(orders, search=''):
    """Group orders by delivery date, keeping only those matching ``search``."""
    grouped = defaultdict(list)
    for order in orders:
        if matches_search(order, search):
            grouped[order.delivery_date].append(order)
    return dict(grouped)


def _sunday_on_or_before(day):
    # weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def period_bounds(view, anchor):
    """Return ``(start, end)`` dates (inclusive) of the period containing ``anchor``."""
    view = parse_view(view)
    if view == DAY:
        return anchor, anchor
    if view == WEEK:
        start = _sunday_on_or_before(anchor)
        return start, start + timedelta(days=6)
    if view == MONTH:
        last = calendar.monthrange(anchor.year, anchor.month)[1]
        return anchor.replace(day=1), anchor.replace(day=last)
    return date(anchor.year, 1, 1), date(anchor.year, 12, 31)


def period_stats(orders, view, anchor):
    """
    Totals for the period containing ``anchor``.

    ``total_items`` counts order lines, not quantities.
    """
    start, end = period_bounds(view, anchor)
    in_period = [o for o in orders if start <= o.delivery_date <= end]

    return {
        'start': start,
        'end': end,
        'total_orders': len(in_period),
        'total_revenue': sum((o.final_total for o in in_period), Decimal('0.00')),
        'total_items': sum(len(_items(o)) for o in in_period),
        'active_days': len({o.delivery_date for o in in_period}),
    }


def month_grid(anchor, by_date=None):
    """
    Six weeks of cells for the month containing ``anchor``, starting on Sunday.

    Each cell carries its date, whether it falls in the anchor's month and
    the number of orders on that day (from ``by_date``).
    """
    by_date = by_date or {}
    first = anchor.replace(day=1)
    start = _sunday_on_or_before(first)

    cells = []
    for offset in range(GRID_CELLS):
        day = start + timedelta(days=offset)
        cells.append({
            'date': day,
            'is_current_month': day.month == anchor.month and day.year == anchor.year,
            'order_count': len(by_date.get(day, [])),
        })
    return cells


def year_overview(orders, year):
    """Twelve months of order count, revenue and paid/unpaid counts."""
    months = [
        {
            'month': month,
            'label': calendar.month_abbr[month].upper(),
            'order_count': 0,
            'revenue': Decimal('0.00'),
            'paid': 0,
            'unpaid': 0,
        }
        for month in range(1, 13)
    ]

    for order in orders:
        if order.delivery_date.year != year:
            continue
        row = months[order.delivery_date.month - 1]
        row['order_count'] += 1
        row['revenue'] += order.final_total
        if order.payment_status == PaymentStatus.PAID:
            row['paid'] += 1
        else:
            row['unpaid'] += 1
    return months


def _parse_time(value):
    for fmt in ('%H:%M', '%H:%M:%S', '%I:%M %p', '%I:%M%p'):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except (ValueError, AttributeError):
            continue
    return None


def format_time(value):
    """
    Format a stored time as a 12-hour label.

        >>> format_time('14:05')
        '2:05 PM'
        >>> format_time('soon')
        'soon'
    """
    parsed = _parse_time(value)
    if parsed is None:
        return value
    hour = parsed.hour % 12 or 12
    suffix = 'AM' if parsed.hour < 12 else 'PM'
    return f'{hour}:{parsed.minute:02d} {suffix}'


def day_orders(orders, day):
    """Orders on ``day`` sorted by delivery time, each with its 12-hour time label."""
    on_day = [o for o in orders if o.delivery_date == day]

    def sort_key(order):
        parsed = _parse_time(order.delivery_time)
        # Unparseable times go last, in their stored order
        return (parsed is None, parsed or datetime.min.time())

    return [
        {'time_label': format_time(order.delivery_time), 'order': order}
        for order in sorted(on_day, key=sort_key)
    ]


def _add_months(day, months):
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def navigate(view, anchor, direction):
    """Move ``anchor`` one period forward (``direction=1``) or back (``-1``)."""
    view = parse_view(view)
    step = 1 if direction >= 0 else -1
    if view == DAY:
        return anchor + timedelta(days=step)
    if view == WEEK:
        return anchor + timedelta(weeks=step)
    if view == MONTH:
        return _add_months(anchor, step)
    return _add_months(anchor, 12 * step)


def calendar_page(orders, view, anchor, search=''):
    """Everything the calendar screen shows for one view and anchor date."""
    view = parse_view(view)
    orders = [o for o in orders if matches_search(o, search)]
    by_date = orders_by_date(orders)

    page = {
        'view': view,
        'date': anchor,
        'previous': navigate(view, anchor, -1),
        'next': navigate(view, anchor, 1),
        'stats': period_stats(orders, view, anchor),
    }

    if view == DAY:
        page['orders'] = day_orders(orders, anchor)
    elif view == WEEK:
        start, _ = period_bounds(WEEK, anchor)
        page['days'] = [
            {'date': start + timedelta(days=i), 'orders': day_orders(orders, start + timedelta(days=i))}
            for i in range(7)
        ]
    elif view == MONTH:
        page['grid'] = month_grid(anchor, by_date)
    else:
        page['months'] = year_overview(orders, anchor.year)
    return page
