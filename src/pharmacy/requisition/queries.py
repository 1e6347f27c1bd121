"""Request listings as seen by a particular staff member."""


def visible_requests(requests, viewer, search=None, status=None):
    """Requests ``viewer`` may see, optionally narrowed by a search term and status.

    Doctors only see the requests they raised themselves; pharmacists and
    administrators see every request. The search term matches the medicine name
    or the doctor name, case-insensitively.
    """
    if viewer is None:
        return []

    if viewer.is_doctor:
        requests = [r for r in requests if str(r.doctor_id) == str(viewer.id)]

    if search:
        term = search.lower()
        requests = [
            r for r in requests if term in (r.medicine_name or "").lower() or term in (r.doctor_name or "").lower()
        ]

    if status and status != "all":
        requests = [r for r in requests if r.status == status]

    return list(requests)
