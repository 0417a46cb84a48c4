"""
Ошибки уровня API. Обработчики в main.py превращают их в JSON {"error": ..., "success": false}.
"""


class AppError(Exception):
    """Ошибка, которую видит клиент: сообщение + HTTP-код."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidFormat(AppError):
    """Неверный формат даты или идентификатора."""

    status_code = 400


class NotFound(AppError):
    status_code = 404


class OrderNotFound(NotFound):
    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class ProductNotFound(AppError):
    status_code = 400

    def __init__(self, message: str = "Product not found."):
        super().__init__(message)
