# algorithms/priority.py
"""
Orders blood requests for display. Urgency never affects allocation.
"""
from algorithms.choices import Urgency

# Keyed by plain strings: choice members hash by name, not value
URGENCY_ORDER = {
    'critical': 0,
    'high': 1,
    'medium': 2,
    'low': 3,
}


def urgency_rank(urgency):
    """
    Convert urgency level to a sort rank (0 = most urgent)
    Unknown values sort last
    """
    return URGENCY_ORDER.get(str(urgency), len(URGENCY_ORDER))


def sort_by_urgency(blood_requests):
    """
    Sort requests critical -> low; within one level the earliest needed_by
    comes first. Accepts a queryset or a plain list.
    """
    requests_list = list(blood_requests) if blood_requests is not None else []

    def sort_key(request):
        needed_by = getattr(request, 'needed_by', None)
        return (
            urgency_rank(request.urgency),
            needed_by is None,
            needed_by.isoformat() if needed_by else '',
        )

    return sorted(requests_list, key=sort_key)


def count_by_urgency(blood_requests):
    """Return {urgency: count} with every urgency level present"""
    counts = {level: 0 for level in Urgency.values}
    for request in blood_requests:
        urgency = str(request.urgency)
        if urgency in counts:
            counts[urgency] += 1
    return counts
