"""AI coach chat grounded on the user's workout log."""
import logging
from functools import partial
from typing import Dict, List, Optional

from workout_log_api.ai import AIClientFactory, create_retry_decorator
from workout_log_api.ai.retry import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WAIT_SECONDS,
    DEFAULT_MIN_WAIT_SECONDS,
)
from workout_log_api.config import settings
from workout_log_api.parsers.models import WorkoutLog, WorkoutMetadata
from workout_log_api.services.date_resolver import DateTextResolver
from workout_log_api.services.progression import (
    ProgressionAnalyzer,
    all_exercises,
    exercise_frequency,
)

logger = logging.getLogger(__name__)

RECENT_WORKOUTS = 5
TOP_EXERCISES = 5

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
}
MAX_TOKENS = 1500
EMPTY_REPLY = "No pude generar una respuesta."

COACH_SYSTEM_PROMPT = """Eres un entrenador personal experto en programación de entrenamiento de fuerza y análisis de progreso.

INSTRUCCIONES:
- Sé directo, práctico y motivador
- Basa tus recomendaciones en los datos reales de progreso
- Si recomiendas cambios, explica el por qué
- Si no hay suficientes datos, sé honesto y pide más información
- Ten en cuenta el volumen semanal total y la recuperación

{context}"""


class CoachError(RuntimeError):
    """Raised when the coach could not produce a reply."""


class CoachNotConfiguredError(CoachError):
    """Raised when no client can be created for the chosen provider."""


def build_context(
    log: WorkoutLog,
    metadata: Dict[str, WorkoutMetadata],
    today_info: Dict[str, str],
    analyzer: Optional[ProgressionAnalyzer] = None,
) -> str:
    """Plain-text summary of recent training for the coach prompt."""
    analyzer = analyzer or ProgressionAnalyzer()
    lines: List[str] = [
        "CONTEXTO DE ENTRENAMIENTO:",
        f"Hoy es {today_info['full_date']} ({today_info['date_key']})",
        "",
    ]

    recent = sorted(log.items(), key=lambda item: item[0], reverse=True)[:RECENT_WORKOUTS]
    if recent:
        lines.append("Últimos entrenamientos:")
        for date_key, day in recent:
            lines.append(f"- {date_key}: {len(day)} ejercicios")
            day_metadata = metadata.get(date_key)
            if day_metadata:
                lines.append(
                    f"  Duración: {day_metadata.duration or '-'}, "
                    f"Volumen: {day_metadata.volume_text or '-'}"
                )
    else:
        lines.append("No hay entrenamientos recientes")

    frequency = exercise_frequency(log)
    top_exercises = sorted(frequency, key=lambda name: (-frequency[name], name))[:TOP_EXERCISES]
    summaries = [
        summary
        for summary in (analyzer.summarize(log, name) for name in top_exercises)
        if summary is not None
    ]
    if summaries:
        lines.append("")
        lines.append("Progresión en ejercicios principales:")
        for summary in summaries:
            sign = "+" if summary.progress > 0 else ""
            lines.append(
                f"- {summary.exercise}: {summary.start_weight:g}kg → {summary.current_weight:g}kg "
                f"({sign}{summary.progress:g}kg en {summary.sessions} sesiones)"
            )
            lines.append(f"  1RM estimado: {round(summary.current_1rm)}kg")

    lines.append("")
    lines.append(f"Total de entrenamientos registrados: {len(log)}")
    lines.append(f"Ejercicios únicos realizados: {len(all_exercises(log))}")
    return "\n".join(lines)


class CoachService:
    """Answers chat messages with an LLM that sees the workout context."""

    def __init__(
        self,
        resolver: Optional[DateTextResolver] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
        max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    ):
        self.resolver = resolver or DateTextResolver()
        self._retry = create_retry_decorator(max_attempts, min_wait_seconds, max_wait_seconds)

    def ask(
        self,
        message: str,
        log: WorkoutLog,
        metadata: Dict[str, WorkoutMetadata],
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """
        Send one chat message to the coach.

        Raises:
            ValueError: If the provider is unknown
            CoachNotConfiguredError: If the provider has no API key or library
            CoachError: If the API call fails after retries
        """
        provider = (provider or settings.COACH_PROVIDER).lower()
        if provider not in DEFAULT_MODELS:
            raise ValueError(f"Unknown coach provider: {provider}. Use 'anthropic' or 'openai'.")
        model = model or settings.COACH_MODEL or DEFAULT_MODELS[provider]

        context = build_context(log, metadata, self.resolver.today_full_info())
        system_prompt = COACH_SYSTEM_PROMPT.format(context=context)

        try:
            if provider == "anthropic":
                client = AIClientFactory.create_anthropic_client()
            else:
                client = AIClientFactory.create_openai_client()
        except (ImportError, ValueError) as e:
            raise CoachNotConfiguredError(str(e)) from e

        api_call = self._call_anthropic if provider == "anthropic" else self._call_openai
        call = partial(api_call, client, model, system_prompt, message)

        try:
            reply = self._retry(call)()
        except Exception as e:
            logger.error(f"Coach {provider} call failed after retries: {e}")
            raise CoachError(f"Coach request failed: {e}") from e

        return reply or EMPTY_REPLY

    @staticmethod
    def _call_anthropic(client, model: str, system_prompt: str, message: str) -> Optional[str]:
        response = client.messages.create(
            model=model,
            max_tokens=MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": message}],
        )
        return next(
            (block.text for block in response.content if getattr(block, "type", None) == "text"),
            None,
        )

    @staticmethod
    def _call_openai(client, model: str, system_prompt: str, message: str) -> Optional[str]:
        response = client.chat.completions.create(
            model=model,
            max_tokens=MAX_TOKENS,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
        )
        return response.choices[0].message.content
