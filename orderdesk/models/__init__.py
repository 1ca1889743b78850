from orderdesk.models.order_models import Order, OrderStatus

__all__ = ["Order", "OrderStatus"]
