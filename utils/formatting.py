from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """
    Normaliza un datetime a UTC. Los valores sin zona horaria se asumen en UTC,
    igual que los timestamps que guarda Firestore.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(value: datetime) -> str:
    # Formato corto: "Jan 5, 2024"
    return f"{value:%b} {value.day}, {value.year}"


def format_date_time(value: datetime) -> str:
    return f"{format_date(value)}, {value:%I:%M %p}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def relative_time(timestamp: datetime, now: datetime) -> str:
    diff_seconds = (as_utc(now) - as_utc(timestamp)).total_seconds()

    minutes = int(diff_seconds // 60)
    hours = int(diff_seconds // 3600)
    days = int(diff_seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 30:
        return _plural(days, "day")
    return format_date(timestamp)


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."
