from fastapi import APIRouter, Depends

from ..dependencies import get_speech_client
from ..models import ErrorResponse, SpeechRequest, SpeechResponse
from ..services.speech import synthesize
from ..speech_client import SpeechClient

router = APIRouter()


@router.post(
    "/speech",
    response_model=SpeechResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def speech(req: SpeechRequest, speech_client: SpeechClient = Depends(get_speech_client)):
    return await synthesize(req, speech=speech_client)
