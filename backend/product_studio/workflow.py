from __future__ import annotations

import logging
from typing import Optional, TypedDict

from langgraph.graph import END, START, StateGraph

from .history import AssetHistory
from .models import GeneratedAsset, GenerationSettings
from .services.gemini import GeminiService
from .services.prompt_compiler import compile_prompt

logger = logging.getLogger(__name__)


class GenerationState(TypedDict, total=False):
  source_image: str
  reference_image: Optional[str]
  settings: GenerationSettings
  prompt: str
  image_data: Optional[str]
  asset: Optional[GeneratedAsset]


async def run_generation(
  *,
  source_image: str,
  settings: GenerationSettings,
  gemini: GeminiService,
  history: AssetHistory,
  reference_image: str | None = None,
) -> GenerationState:
  """Compile the prompt, render one image and record it when one came back."""
  builder = StateGraph(GenerationState)

  builder.add_node("compile_prompt", _compile_prompt_node)
  builder.add_node("generate_image", _make_generate_node(gemini))
  builder.add_node("record_asset", _make_record_node(history))

  builder.add_edge(START, "compile_prompt")
  builder.add_edge("compile_prompt", "generate_image")
  builder.add_conditional_edges(
    "generate_image",
    _route_after_generation,
    {"record": "record_asset", "empty": END},
  )
  builder.add_edge("record_asset", END)

  graph = builder.compile()

  initial_state: GenerationState = {
    "source_image": source_image,
    "reference_image": reference_image,
    "settings": settings,
  }

  return await graph.ainvoke(initial_state)


def _compile_prompt_node(state: GenerationState) -> dict:
  prompt = compile_prompt(state["settings"], has_reference=bool(state.get("reference_image")))
  return {"prompt": prompt}


def _make_generate_node(gemini: GeminiService):
  async def node(state: GenerationState) -> dict:
    image_data = await gemini.generate(
      state["source_image"],
      state["settings"],
      reference_image=state.get("reference_image"),
      prompt=state["prompt"],
    )
    return {"image_data": image_data}

  return node


def _route_after_generation(state: GenerationState) -> str:
  if state.get("image_data"):
    return "record"
  logger.warning("No image produced; skipping history")
  return "empty"


def _make_record_node(history: AssetHistory):
  def node(state: GenerationState) -> dict:
    return {"asset": history.add(state["image_data"])}

  return node
