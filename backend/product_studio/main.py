from __future__ import annotations

import asyncio
import logging
import math
import time

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.genai import errors as genai_errors

from .config import ConfigurationError, settings
from .history import AssetHistory, AssetNotFoundError
from .labels import UnsupportedLocaleError, option_catalog
from .models import (
  GeneratedAsset,
  GenerateRequest,
  GenerateResponse,
  HealthResponse,
  HistoryResponse,
  OptionItem,
  PromptPreviewRequest,
  PromptPreviewResponse,
  SuggestionsRequest,
  SuggestionsResponse,
)
from .services.gemini import GeminiService, GeminiServiceError, is_quota_error
from .services.prompt_compiler import compile_prompt
from .utils.images import ImageDataError, parse_data_uri
from .workflow import run_generation

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "Failed to generate an image. Please try again."


app = FastAPI(title="AI Product Studio")

app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.cors_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


if not settings.has_api_key:
  logger.warning("GEMINI_API_KEY is not set; generation requests will be rejected until it is configured.")

gemini_service = GeminiService(
  api_key=settings.gemini_api_key,
  image_model=settings.image_model,
  text_model=settings.text_model,
)
history = AssetHistory()
# Only one generation may be in flight at a time.
generation_lock = asyncio.Lock()


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
  return HealthResponse(
    status="ok",
    configured=bool(gemini_service.api_key),
    model=gemini_service.image_model,
  )


@app.get("/api/options", response_model=dict[str, list[OptionItem]])
async def options(locale: str = "en") -> dict[str, list[OptionItem]]:
  try:
    return option_catalog(locale)
  except UnsupportedLocaleError as error:
    raise HTTPException(status_code=400, detail=f"Unsupported locale: {locale}") from error


@app.post("/api/prompt/preview", response_model=PromptPreviewResponse)
async def preview_prompt(request: PromptPreviewRequest) -> PromptPreviewResponse:
  return PromptPreviewResponse(prompt=compile_prompt(request.settings, has_reference=request.has_reference))


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest) -> GenerateResponse:
  if generation_lock.locked():
    raise HTTPException(status_code=409, detail="A generation is already in progress")

  async with generation_lock:
    start_time = time.perf_counter()
    try:
      logger.info(f"Generating product shot: {request.settings.model_dump(mode='json')}")
      state = await run_generation(
        source_image=request.image,
        reference_image=request.reference_image or None,
        settings=request.settings,
        gemini=gemini_service,
        history=history,
      )
    except ConfigurationError as error:
      logger.error(f"Configuration error: {error}")
      raise HTTPException(status_code=503, detail=str(error)) from error
    except ImageDataError as error:
      raise HTTPException(status_code=400, detail=str(error)) from error
    except genai_errors.APIError as error:
      raise _service_error(error) from error
    except Exception as error:
      logger.error(f"Unexpected error: {error}", exc_info=True)
      raise HTTPException(status_code=500, detail=f"Internal server error: {error}") from error

  asset = state.get("asset")
  if asset is None:
    raise HTTPException(status_code=502, detail=EMPTY_RESULT_MESSAGE)

  return GenerateResponse(
    status="success",
    asset=asset,
    prompt=state.get("prompt"),
    processing_time_seconds=time.perf_counter() - start_time,
  )


@app.post("/api/suggestions", response_model=SuggestionsResponse)
async def suggestions(request: SuggestionsRequest) -> SuggestionsResponse:
  try:
    items = await gemini_service.suggest_directions(
      request.image,
      reference_image=request.reference_image or None,
    )
  except ConfigurationError as error:
    raise HTTPException(status_code=503, detail=str(error)) from error
  except ImageDataError as error:
    raise HTTPException(status_code=400, detail=str(error)) from error
  except GeminiServiceError as error:
    logger.error(f"Suggestion error: {error}")
    raise HTTPException(status_code=502, detail=str(error)) from error
  except genai_errors.APIError as error:
    raise _service_error(error) from error

  return SuggestionsResponse(suggestions=items)


@app.get("/api/history", response_model=HistoryResponse)
async def list_history() -> HistoryResponse:
  return HistoryResponse(items=history.entries())


@app.delete("/api/history")
async def clear_history() -> dict:
  return {"status": "success", "cleared": history.clear()}


@app.get("/api/history/{asset_id}", response_model=GeneratedAsset)
async def get_asset(asset_id: str) -> GeneratedAsset:
  return _lookup(asset_id)


@app.get("/api/history/{asset_id}/download")
async def download_asset(asset_id: str) -> Response:
  asset = _lookup(asset_id)
  image = parse_data_uri(asset.image_data)
  return Response(
    content=image.data,
    media_type=image.mime_type,
    headers={"Content-Disposition": f'attachment; filename="product-shot-{asset.id}.png"'},
  )


def _lookup(asset_id: str) -> GeneratedAsset:
  try:
    return history.get(asset_id)
  except AssetNotFoundError as error:
    raise HTTPException(status_code=404, detail=f"Asset not found: {asset_id}") from error


def _service_error(error: Exception) -> HTTPException:
  quota, retry_after = is_quota_error(error)
  if quota:
    headers = {"Retry-After": str(math.ceil(retry_after))} if retry_after else None
    return HTTPException(status_code=429, detail=f"Gemini quota exceeded: {error}", headers=headers)
  return HTTPException(status_code=502, detail=f"Image generation failed: {error}")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
  return JSONResponse(
    status_code=exc.status_code,
    content={
      "status": "error",
      "message": str(exc.detail),
    },
    headers=exc.headers,
  )


def run() -> None:
  """Launch the uvicorn server on ``BACKEND_PORT``."""
  import uvicorn

  uvicorn.run(
    "product_studio.main:app",
    host="0.0.0.0",
    port=settings.backend_port,
    reload=False,
  )


if __name__ == "__main__":
  run()
