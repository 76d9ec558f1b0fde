"""
Основные доменные типы общего ядра.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, model_validator

# Идентификаторы в приложении - неотрицательные целые числа
EntityId = int


class DateRange(BaseModel):
    """Закрытый диапазон дат [start_date, end_date]."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def end_not_before_start(self) -> "DateRange":
        if self.start_date > self.end_date:
            raise ValueError("Start date must not be after end date.")
        return self

    def overlaps(self, other: "DateRange") -> bool:
        """Проверяет пересечение двух диапазонов (границы включены)."""
        return (
            self.start_date <= other.end_date and other.start_date <= self.end_date
        )


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass
