"""Application services."""
from .account_service import AccountService, resolve_or_provision_user
from .checkout_service import CheckoutService
from .order_export_service import ProcessingOrdersExporter
from .order_reconciler import IgnoredWebhook, OrderReconciler, RemoteStatusChange, build_order_document
from .order_service import OrderApplicationService
from .payment_webhook_service import PaymentWebhookService

__all__ = [
    "AccountService",
    "CheckoutService",
    "IgnoredWebhook",
    "OrderApplicationService",
    "OrderReconciler",
    "PaymentWebhookService",
    "ProcessingOrdersExporter",
    "RemoteStatusChange",
    "build_order_document",
    "resolve_or_provision_user",
]
