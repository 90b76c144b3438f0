"""Gemini AI client for SEO keyword generation.

Implements the EnrichmentClient contract on top of google-generativeai.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from seo_engine.config import Config
from seo_engine.core.batch.interfaces import EnrichmentClient
from seo_engine.core.batch.models import Record
from seo_engine.core.errors import PermanentRecordError, TransientCallError
from seo_engine.utils.enrichment import normalize_keywords

KEYWORD_PROMPT = (
    "Hola, estamos creando un e-commerce en República Dominicana y necesitamos crear "
    "un listado de keywords para cada producto de nuestro catalogo que contenga los "
    "regionalismos clásicos del pais, ¿crees que puedas ayudarnos con la creación de "
    "estas keywords? Para esta tarea, te voy a dar el nombre del producto y sus "
    "categorias. Producto: {title} y las categorias a que pertenece son estas: "
    "{category}. Necesito que solo me respondas con el resultado sea una lista "
    "seperada por comma."
)

RecordLookup = Callable[[str], Awaitable[Optional[Record]]]


class GeminiKeywordClient(EnrichmentClient):
    """Generates comma-separated SEO keywords for a product.

    When a lookup is given, the product is re-read by key before the call so
    products deleted since paging fail permanently instead of being retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        lookup: Optional[RecordLookup] = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Optional API key. If not provided, reads from environment.
            model_name: Optional model override (GEMINI_MODEL)
            lookup: Optional coroutine returning the current record for a key
            temperature: Generation temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate

        Raises:
            ValueError: If API key not found in environment
        """
        if api_key is None:
            api_key = Config.gemini_api_key()

        if not api_key:
            raise ValueError(
                "Gemini API key required. Set GOOGLE_GENERATIVE_AI_API_KEY or GEMINI_API_KEY environment variable."
            )

        self.api_key = api_key
        self.model_name = model_name or Config.gemini_model()
        self.lookup = lookup
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.safety_settings = [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"}
        ]
        self._init_genai()

    def _init_genai(self) -> None:
        """Initialize Google Generative AI client.

        Raises:
            RuntimeError: If Gemini client initialization fails
        """
        try:
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self.genai = genai
            self.model = genai.GenerativeModel(
                model_name=self.model_name, safety_settings=self.safety_settings
            )
        except Exception as e:
            raise RuntimeError(f"Failed to initialize Gemini client: {str(e)}")

    @staticmethod
    def build_prompt(record: Record) -> str:
        return KEYWORD_PROMPT.format(
            title=record.title.strip(), category=(record.category or "").strip() or "general"
        )

    async def enrich(self, record: Record) -> str:
        """Generate keywords for one product.

        Raises:
            PermanentRecordError: Product no longer exists or has no title
            TransientCallError: Gemini failed or returned nothing usable
        """
        if self.lookup is not None:
            current = await self.lookup(record.key)
            if current is None:
                raise PermanentRecordError(record.key)
            record = current

        if not record.title or not record.title.strip():
            raise PermanentRecordError(record.key)

        try:
            response = await asyncio.to_thread(
                self.model.generate_content,
                self.build_prompt(record),
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_tokens,
                },
            )
        except Exception as e:
            raise TransientCallError(record.key, f"Gemini generation failed: {str(e)}") from e

        text = self._response_text(response)
        if not text:
            raise TransientCallError(record.key, "Gemini returned no content")

        try:
            return normalize_keywords(text)
        except ValueError as e:
            raise TransientCallError(record.key, str(e)) from e

    @staticmethod
    def _response_text(response: Any) -> Optional[str]:
        # response.text raises when the candidate was blocked by safety filters
        try:
            return response.text
        except Exception:
            return None
