"""OpenAI Images API client for photo restoration."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from photo_restorer.domain.images import SelectedImage
from photo_restorer.services.restoration import RestorationClient

_OUTPUT_FORMATS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/webp": "webp",
}


@dataclass
class OpenAIRestorationClient(RestorationClient):
    """Restoration client backed by the OpenAI image edit endpoint."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAIRestorationClient":
        """Create an OpenAI restoration client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, max_retries=0),
            model=model,
        )

    async def restore(self, *, image: SelectedImage, prompt: str) -> str:
        """Send the image for editing and return the base64 result."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "image": (image.filename, image.content, image.mime_type),
            "prompt": prompt,
            "n": 1,
        }
        output_format = _OUTPUT_FORMATS.get(image.mime_type)
        if output_format:
            request_payload["output_format"] = output_format

        response = await self.client.images.edit(**request_payload)
        if not response.data or not response.data[0].b64_json:
            raise RuntimeError("OpenAI returned an empty image")
        return response.data[0].b64_json

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
