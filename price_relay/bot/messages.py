"""Telegram bot message templates and constants.

Contains all user-facing message templates in Spanish, relay output lines and
log templates. Centralizes message management for consistent output in the
target group.
"""

# Bot commands and descriptions
START_MESSAGE = (
    "Reenvío publicaciones del grupo de origen al grupo de venta con el precio en soles.\n\n"
    "Fórmula: precio USD + {tax_percent}% impuesto + {shopper_fee_percent}% shopper "
    "+ {profit_percent}% ganancia + ${shipping_fixed_amount} envío, "
    "al tipo de cambio {fx_rate} (redondeado hacia arriba).\n"
    "Precios con $ explícito ($28, 28$) solo se convierten al tipo de cambio. "
    "Precios en S/ se reenvían tal cual."
)

CHAT_ID_MESSAGE = "ID de este chat: {chat_id}"

# Relay output lines
PRICE_LINE = "💰 Precio: S/ {price}"
NAMED_PRICE_LINE = "💰 {name} Precio: S/ {price}"
SIZES_LINE = "📏 Tallas: {sizes}"
SIZES_SEPARATOR = ", "

# Admin notification template
ADMIN_NOTIFICATION = "🚨 Price Relay Alert:\n{message}"
RELAY_FAILED_NOTIFICATION = "No se pudo reenviar la publicación al grupo destino: {error}"

# Log messages
LOG_GROUP_DISCOVERY = (
    "[Grupo] \"{title}\" → ID: {chat_id}. "
    "Copia ese ID a SOURCE_CHAT_ID o TARGET_CHAT_ID y reinicia el bot."
)
LOG_GROUPS_NOT_CONFIGURED = (
    "Falta configurar SOURCE_CHAT_ID y TARGET_CHAT_ID; "
    "los IDs de los grupos se mostrarán en el log cuando lleguen mensajes."
)
