"""Tool-augmented chat pipeline.

Answers one chat request:
  1. Tool-bound LLM call with the transcript and the tool schemas.
  2. Requested tools run in order; results and the assistant message are
     appended to the transcript.
  3. The round is classified (creation / already-exists / failure / discovery)
     and the loop either re-prompts with guidance or stops.
  4. Synthesis: a direct answer is passed through; otherwise one narrative-only
     LLM call narrates the final round's results, falling back to a raw dump.

Modules:
  orchestrator  — run_chat(), classify_round(), guidance_for()
  synthesis     — direct_answer(), narrate(), original_query()
  prompts       — guidance texts, synthesis prompt, fallback dump
"""

from .orchestrator import (  # noqa: F401
    DEFAULT_MAX_ROUNDS,
    RoundOutcome,
    classify_round,
    guidance_for,
    run_chat,
)
from .prompts import TOOL_GUIDANCE  # noqa: F401
from .synthesis import direct_answer, narrate, original_query  # noqa: F401
