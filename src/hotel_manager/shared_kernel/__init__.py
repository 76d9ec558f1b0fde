"""
Общее ядро (Shared Kernel) для системы управления отелем.

Содержит общие типы данных и исключения, используемые контекстами.
"""

from .domain import (
    BusinessRuleValidationException,
    DateRange,
    DomainException,
    # Базовые типы
    EntityId,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "DateRange",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
]
