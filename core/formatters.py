from enum import Enum


def iso(value):
    return value.isoformat() if value else None


def enum_value(value):
    return value.value if isinstance(value, Enum) else value


def id_str(value):
    return str(value) if value is not None else None
