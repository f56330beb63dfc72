from sqlalchemy.orm import class_mapper


def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a JSON-friendly dictionary for the audit log."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Dates and datetimes as ISO strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        # Decimals as strings so no cents are lost
        elif hasattr(value, 'quantize'):
            value = str(value)
        # Enums by name
        elif hasattr(value, 'name') and hasattr(value, 'value'):
            value = value.name
        result[c.key] = value
    return result


__all__ = ['sqlalchemy_to_dict']
