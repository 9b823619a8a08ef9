import base64

from ..errors import ValidationError
from ..models import SpeechRequest, SpeechResponse
from ..speech_client import SpeechClient


async def synthesize(req: SpeechRequest, *, speech: SpeechClient) -> SpeechResponse:
    if not req.text:
        raise ValidationError("Text is required")
    audio = await speech.synthesize(req.text)
    return SpeechResponse(audio=base64.b64encode(audio).decode("ascii"))
