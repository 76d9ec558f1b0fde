"""
Модуль контекста бронирования (Booking Context).

Отвечает за управление бронированиями номеров в отеле, включая:
- Хранение бронирований и отфильтрованного представления
- Изменение бронирований с проверкой дубликатов и конфликтов
- Вывод активных бронирований
"""

from . import domain, application, infrastructure, interfaces

__all__ = [
    'domain',
    'application',
    'infrastructure',
    'interfaces',
]
