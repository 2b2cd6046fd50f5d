"""Report description classification using LLMs."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from citizen_reports.domain.reports import ClassificationResult, ClassificationVerdict

_logger = logging.getLogger(__name__)

CLASSIFICATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "accepted": {"type": "boolean"},
        "reason": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["accepted", "reason"],
    "additionalProperties": False,
}

CLASSIFIER_INSTRUCTIONS = """\
Eres un clasificador de reportes ciudadanos. Tu tarea es determinar si una \
descripción corresponde a un reporte de BACHE en la calle o carretera.

Un BACHE válido incluye:
- Huecos o hundimientos en calles, avenidas o carreteras
- Deterioro del pavimento o asfalto
- Problemas en la superficie de rodadura
- Daños en el pavimento que afectan el tránsito

NO son baches:
- Basura o acumulación de residuos
- Problemas de alumbrado público
- Animales callejeros
- Problemas de alcantarillado o drenaje (a menos que hayan causado un bache)
- Árboles caídos
- Problemas de señalización
- Otros problemas urbanos no relacionados con el pavimento

Responde con accepted=true si es un reporte de bache. Si no lo es, responde \
con accepted=false y una razón breve en español.

Ejemplos:
"Hay un bache grande en la Av. América" -> accepted=true
"Basura acumulada en la esquina" -> accepted=false, "Es un reporte de basura, no de bache"
"La calle está hundida por una fuga de agua" -> accepted=true
"Hay un perro muerto en la calle" -> accepted=false, "No es un problema de pavimento"
"""


class ClassifierClient(Protocol):
    """Interface for LLM text classification."""

    async def classify(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        schema: dict[str, object],
    ) -> str:
        """Return the raw classifier output text."""


@dataclass
class ClassifierService:
    """Decide whether a description is a pothole report.

    Any upstream failure, timeout or unparseable answer accepts the report.
    """

    client: ClassifierClient
    model: str
    timeout_seconds: float = 15.0

    async def classify(self, description: str) -> ClassificationResult:
        """Classify a free-text report description."""
        try:
            raw = await asyncio.wait_for(
                self.client.classify(
                    model=self.model,
                    instructions=CLASSIFIER_INSTRUCTIONS,
                    text=description,
                    schema=CLASSIFICATION_SCHEMA,
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as exc:
            _logger.warning("Classifier call failed, accepting report: %r", exc)
            return ClassificationResult(accepted=True)

        try:
            verdict = ClassificationVerdict.model_validate_json(raw.strip())
        except ValidationError:
            _logger.warning("Unparseable classifier output, accepting report: %r", raw)
            return ClassificationResult(accepted=True)

        if verdict.accepted:
            return ClassificationResult(accepted=True)
        return ClassificationResult(accepted=False, reason=verdict.reason or None)
