"""
Search & sort helpers shared by pages and the dashboard
All search is a case-insensitive substring match, same as the catalog search box.
"""


def _field_matches(value, term):
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(_field_matches(item, term) for item in value)
    return term in str(value).lower()


def matches_search(obj, term, fields):
    """Return True if term appears in any of the named attributes (or dict keys) of obj"""
    if not term:
        return True
    term = term.lower()
    for field in fields:
        if isinstance(obj, dict):
            value = obj.get(field)
        else:
            value = getattr(obj, field, None)
        if _field_matches(value, term):
            return True
    return False


def filter_by_search(items, term, fields):
    """Filter an iterable of objects down to the ones matching term"""
    term = (term or '').strip()
    if not term:
        return list(items)
    return [item for item in items if matches_search(item, term, fields)]


def newest_first(items, *date_attrs):
    """Sort by the first non-null date attribute, most recent first. Undated items go last."""
    def sort_key(item):
        for attr in date_attrs:
            value = getattr(item, attr, None)
            if value is not None:
                return value.timestamp()
        return float('-inf')

    return sorted(items, key=sort_key, reverse=True)
