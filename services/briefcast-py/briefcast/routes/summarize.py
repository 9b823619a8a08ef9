from typing import Optional

import httpx
from fastapi import APIRouter, Depends

from ..config import Config
from ..dependencies import get_config, get_fetch_client, get_llm_client
from ..model_client import LLMClient
from ..models import ErrorResponse, SummarizeRequest, SummarizeResponse
from ..services.summarizer import summarize as summarize_article

router = APIRouter()


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def summarize(
    req: SummarizeRequest,
    config: Config = Depends(get_config),
    llm: LLMClient = Depends(get_llm_client),
    fetch_client: Optional[httpx.AsyncClient] = Depends(get_fetch_client),
):
    return await summarize_article(req, llm=llm, config=config, http_client=fetch_client)
