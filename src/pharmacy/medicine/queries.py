"""Catalogue search used by the inventory and expiry views."""


def _matches(term, *values):
    term = term.lower()
    return any(term in (value or "").lower() for value in values)


def search_medicines(medicines, term=None, category=None):
    """Filter by a case-insensitive term on name or generic name, and an exact category."""
    results = []
    for medicine in medicines:
        if term and not _matches(term, medicine.name, medicine.generic_name):
            continue
        if category and medicine.category != category:
            continue
        results.append(medicine)
    return results


def categories(medicines):
    """Distinct categories in the order they first appear."""
    return list(dict.fromkeys(m.category for m in medicines))
