# app/domain/errors.py


class NotFoundError(LookupError):
    pass


class CartNotFoundError(NotFoundError):
    def __init__(self, message: str = "Cart not found"):
        super().__init__(message)


class EmptyCartError(ValueError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InsufficientStockError(ValueError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Not enough stock available for product ID {product_id}")


class InvalidQuantityError(ValueError):
    pass


class ConflictError(Exception):
    pass


class DiscountUnavailableError(ConflictError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Discount code {code} is no longer available")
