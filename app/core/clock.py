from datetime import datetime, timezone


class SystemClock:
    """Источник текущего времени (UTC)"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = SystemClock()


def get_clock() -> SystemClock:
    """Зависимость FastAPI; в тестах подменяется управляемыми часами"""
    return system_clock


def as_utc(value: datetime) -> datetime:
    """SQLite возвращает naive datetime, считаем его UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
