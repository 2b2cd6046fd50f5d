"""User-facing reply texts and greeting detection."""

import random
import unicodedata

GREETINGS = (
    "Hola! 👋",
    "¡Hola! 😊",
    "¡Buen día!",
    "¡Hola, bienvenido/a!",
)

GREETING_KEYWORDS = (
    "hola",
    "buenos dias",
    "buenas tardes",
    "buenas noches",
    "buen dia",
    "buena tarde",
    "buena noche",
    "saludos",
    "inicio",
    "iniciar",
    "empezar",
    "comenzar",
    "menu",
    "ayuda",
    "help",
)

MISSING_LOCATION = (
    "❌ No recibí tu ubicación. Por favor, usa el botón de adjuntar (📎) → "
    "Ubicación para compartir tu ubicación."
)
MISSING_PHOTO = "❌ No recibí ninguna foto. Por favor, envía una imagen del problema."
INVALID_IMAGE = "❌ El archivo no es una imagen válida. Por favor, envía una foto."
RATE_LIMITED = (
    "Por favor, espera unos minutos antes de enviar otro mensaje. "
    "Gracias por tu comprensión. 🙏"
)
PROCESSING_FAILED = (
    "Disculpa, tuve un problema procesando tu mensaje. Por favor, intenta "
    'nuevamente escribiendo "hola" para reiniciar.'
)


def _normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.lower().strip())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def is_greeting(text: str) -> bool:
    """Return true when the text contains a greeting keyword."""
    normalized = _normalize(text)
    return any(keyword in normalized for keyword in GREETING_KEYWORDS)


def random_greeting(rng: random.Random | None = None) -> str:
    return (rng or random).choice(GREETINGS)


def welcome_message(rng: random.Random | None = None) -> str:
    """Build the welcome text with reporting instructions."""
    return f"""{random_greeting(rng)} Bienvenido al sistema de reportes ciudadanos.

📝 Para registrar tu reporte, necesito que me cuentes:

*¿Qué problema quieres reportar?*

Por favor, descríbeme la situación con el mayor detalle posible.

💡 Ejemplo:
```Hay un bache grande en la esquina de la Av. América```"""


def location_request_message() -> str:
    return """📍 Perfecto. Ahora necesito saber la ubicación del problema.

Por favor, *comparte tu ubicación* usando el botón de adjuntar (📎) → Ubicación.

💡 Puedes enviar:
• Tu ubicación actual (si estás en el lugar)
• La ubicación exacta del problema en el mapa"""


def photo_request_message() -> str:
    return """📷 Excelente. Por último, necesito una foto del problema.

Por favor, envía una *foto* que muestre claramente la situación.

💡 Consejo: Toma una foto clara y bien iluminada del problema."""


def success_message(report_id: str) -> str:
    return f"""✅ *¡Reporte registrado exitosamente!*

📋 ID del reporte: ```{report_id}```

Tu reporte ha sido enviado al sistema municipal y será atendido a la brevedad posible.

¡Gracias por contribuir a mejorar nuestra ciudad! 🏙️

---
Si deseas hacer otro reporte, simplemente escribe "hola" para comenzar de nuevo."""


def error_message() -> str:
    return """❌ *Hubo un problema al registrar tu reporte.*

Por favor, intenta nuevamente escribiendo "hola" para reiniciar el proceso.

Si el problema persiste, contacta con soporte técnico."""


def rejection_message(reason: str | None) -> str:
    """Explain that the description is not a pothole report."""
    lines = ["🚧 Este canal solo recibe reportes de *baches* y daños en el pavimento."]
    if reason:
        lines.append(f"Motivo: {reason}")
    lines.append(
        "Si quieres reportar un bache, descríbelo con el mayor detalle posible."
    )
    return "\n\n".join(lines)
