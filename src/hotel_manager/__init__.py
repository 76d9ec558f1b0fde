"""
Система управления отелем: контекст бронирования.

Содержит:
- shared_kernel: общие типы и исключения
- booking: хранилище бронирований и команды над ним
- bootstrap: сборку компонентов приложения
"""

__version__ = "0.1.0"
