"""OpenAI Responses API client for report classification."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from citizen_reports.services.classifier import ClassifierClient


@dataclass
class OpenAIClassifierClient(ClassifierClient):
    """Classifier client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(cls, api_key: str) -> "OpenAIClassifierClient":
        """Create an OpenAI classifier client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def classify(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        schema: dict[str, object],
    ) -> str:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=text,
            text={
                "format": {
                    "type": "json_schema",
                    "name": "report_classification",
                    "strict": True,
                    "schema": schema,
                }
            },
            temperature=0.3,
            max_output_tokens=150,
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text
