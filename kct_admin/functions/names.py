"""Names of the hosted edge functions."""

VENDOR_SHOPIFY_IMPORT = "vendor-shopify-import"
MANUAL_INVENTORY_REFRESH = "manual-inventory-refresh"
INVENTORY_SYNC_STATUS = "inventory-sync-status"
PRODUCT_IMAGE_UPLOAD = "product-image-upload"

SHIPPING_RATES = "shipping-rates"
SHIPPING_LABEL = "shipping-label"
SHIPPING_TRACKING = "shipping-tracking"
SHIPPING_TEMPLATE_RECOMMENDATION = "shipping-template-recommendation"

ORDER_STATUS_UPDATE = "order-status-update"
ORDER_AUTOMATION = "order-automation"
PRIORITY_QUEUE_MANAGEMENT = "priority-queue-management"
PROCESSING_ANALYTICS = "processing-analytics"
EXCEPTION_HANDLING = "exception-handling"
CUSTOMER_COMMUNICATION = "customer-communication"
SEND_EMAIL = "send-email"
SYSTEM_HEALTH_CHECK = "system-health-check"
