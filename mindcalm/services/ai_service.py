"""AI provider service (Gemini + Ollama) and the prompts built on top of it.

Each feature helper builds one prompt, makes one provider call and parses the
result. Failures are logged and replaced by the helper's fallback value, so
callers never see provider errors. The one exception is
``analyze_thought_record``, which raises ``AIServiceError`` for the router to
report.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from mindcalm.core.config import settings

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when a provider call or its output parsing fails."""


THOUGHT_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["distortion", "alternativeThought"],
    "properties": {
        "distortion": {"type": "string"},
        "alternativeThought": {"type": "string"},
    },
}

WORKOUT_PLAN_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "dayOfWeek": {"type": "integer"},
            "exercises": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "sets": {"type": "integer"},
                        "reps": {"type": "string"},
                    },
                },
            },
        },
    },
}

INSIGHTS_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["text", "relatedMetrics"],
        "properties": {
            "text": {"type": "string"},
            "relatedMetrics": {"type": "array", "items": {"type": "string"}},
        },
    },
}

FALLBACK_INSIGHTS: list[dict[str, Any]] = [
    {"text": "Sleep more to reduce anxiety.", "related_metrics": ["Sleep", "Anxiety"]},
    {"text": "Exercise helps mood.", "related_metrics": ["Exercise", "Mood"]},
]


# ---------------------------------------------------------------------------
# Provider plumbing
# ---------------------------------------------------------------------------


def generate_text(prompt: str) -> str:
    """Free-text generation through the configured provider."""
    raw = _call_provider(settings.ai_provider.strip().lower(), prompt, None)
    if isinstance(raw, str):
        return raw.strip()
    return json.dumps(raw)


def generate_json(prompt: str, schema: dict[str, Any]) -> Any:
    """Schema-constrained JSON generation. Raises AIServiceError on bad output."""
    raw = _call_provider(settings.ai_provider.strip().lower(), prompt, schema)
    try:
        parsed = _parse_provider_output(raw)
        _validate_value(parsed, schema, "$")
    except ValueError as exc:
        raise AIServiceError(f"Provider returned invalid structured output: {exc}") from exc
    return parsed


def _call_provider(provider: str, prompt: str, schema: dict[str, Any] | None) -> str | dict[str, Any] | list[Any]:
    if provider == "gemini":
        return _call_gemini(prompt, schema)
    if provider == "ollama":
        return _call_ollama(prompt, schema)
    raise AIServiceError(f"Unsupported provider '{provider}'. Use 'gemini' or 'ollama'.")


def _call_gemini(prompt: str, schema: dict[str, Any] | None) -> str | dict[str, Any] | list[Any]:
    if not settings.gemini_api_key:
        raise AIServiceError("GEMINI_API_KEY is not configured")

    try:
        from google import genai
        from google.genai import types
    except ImportError as exc:
        raise AIServiceError("Gemini SDK is not installed. Add 'google-genai' to dependencies.") from exc

    client = genai.Client(api_key=settings.gemini_api_key)

    config = None
    if schema is not None:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )

    response = client.models.generate_content(
        model=settings.gemini_model,
        contents=prompt,
        config=config,
    )

    if schema is not None:
        parsed = getattr(response, "parsed", None)
        if isinstance(parsed, (dict, list)):
            return parsed

    text = getattr(response, "text", None)
    if schema is not None and not text:
        raise AIServiceError("Gemini returned an empty response")
    return text or ""


def _call_ollama(prompt: str, schema: dict[str, Any] | None) -> str:
    url = settings.ollama_base_url.rstrip("/") + "/api/generate"
    payload: dict[str, Any] = {
        "model": settings.ollama_model,
        "prompt": prompt,
        "stream": False,
    }
    if schema is not None:
        payload["format"] = schema

    try:
        response = httpx.post(url, json=payload, timeout=settings.ai_timeout_seconds)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise AIServiceError(f"Ollama request failed: {exc}") from exc

    data = response.json()
    if "response" not in data:
        raise AIServiceError("Ollama response missing 'response' field")

    return data["response"]


def _parse_provider_output(raw: str | dict[str, Any] | list[Any]) -> dict[str, Any] | list[Any]:
    if isinstance(raw, (dict, list)):
        return raw

    if not isinstance(raw, str):
        raise ValueError(f"Provider returned non-string/non-JSON output: {type(raw).__name__}")

    normalized = _strip_code_fences(raw)

    try:
        parsed = json.loads(normalized)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc.msg}") from exc

    if not isinstance(parsed, (dict, list)):
        raise ValueError("JSON must be an object or an array")

    return parsed


def _strip_code_fences(text: str) -> str:
    """Normalize fenced markdown JSON to plain JSON text."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    lines = stripped.splitlines()
    if len(lines) >= 2 and lines[0].startswith("```") and lines[-1].strip() == "```":
        return "\n".join(lines[1:-1]).strip()

    return stripped


def _validate_value(value: Any, schema: dict[str, Any], path: str) -> None:
    schema_type = schema.get("type")
    if schema_type and not _is_type(value, schema_type):
        raise ValueError(f"{path}: expected type '{schema_type}'")

    if schema_type == "object" and isinstance(value, dict):
        for key in schema.get("required", []):
            if key not in value:
                raise ValueError(f"{path}: missing required field '{key}'")
        properties = schema.get("properties", {})
        for key, item in value.items():
            if key in properties:
                _validate_value(item, properties[key], f"{path}.{key}")
        return

    if schema_type == "array" and isinstance(value, list):
        item_schema = schema.get("items")
        if item_schema:
            for idx, item in enumerate(value):
                _validate_value(item, item_schema, f"{path}[{idx}]")


def _is_type(value: Any, schema_type: str) -> bool:
    if schema_type == "string":
        return isinstance(value, str)
    if schema_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if schema_type == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if schema_type == "boolean":
        return isinstance(value, bool)
    if schema_type == "object":
        return isinstance(value, dict)
    if schema_type == "array":
        return isinstance(value, list)
    if schema_type == "null":
        return value is None
    return True


# ---------------------------------------------------------------------------
# Feature prompts
# ---------------------------------------------------------------------------


def analyze_thought_record(situation: str, thought: str, emotion: str) -> dict[str, str]:
    """Name the primary cognitive distortion and suggest a balanced thought."""
    prompt = (
        "You are an expert CBT therapist. A user has provided a thought record.\n"
        "Analyze the following:\n"
        f"Situation: {situation}\n"
        f"Automatic Thought: {thought}\n"
        f"Emotion: {emotion}\n\n"
        "Your task:\n"
        "1. Identify the primary cognitive distortion (e.g., Catastrophizing, "
        "All-or-nothing thinking, Mind reading).\n"
        "2. Suggest a more balanced, evidence-based alternative thought.\n\n"
        'Respond in JSON format with keys: "distortion" and "alternativeThought".'
    )
    try:
        result = generate_json(prompt, THOUGHT_ANALYSIS_SCHEMA)
    except Exception as exc:  # noqa: BLE001 - any provider failure is reported the same way
        logger.exception("Error analyzing thought record")
        raise AIServiceError("Failed to analyze thought record.") from exc
    return {
        "distortion": result.get("distortion", ""),
        "alternative_thought": result.get("alternativeThought", ""),
    }


def analyze_evidence(thought: str) -> str:
    prompt = (
        f'The user has this anxious thought: "{thought}".\n'
        'Act as a CBT therapist guiding them through the "Check" phase (evaluating evidence).\n\n'
        'Provide 3 bullet points of "Evidence Against" this thought.\n'
        "Challenge logical fallacies politely and suggest objective facts they might be missing.\n"
        "Keep it brief and conversational."
    )
    try:
        return generate_text(prompt)
    except Exception:  # noqa: BLE001
        logger.exception("Error analyzing evidence")
        return "Could not generate evidence suggestions."


def get_medication_info(med_name: str) -> str:
    prompt = (
        f'Provide a brief, non-medical summary for the medication "{med_name}" in the context '
        "of treating Generalized Anxiety Disorder (GAD) or anxiety.\n"
        "Include:\n"
        "1. What class of drug it is.\n"
        "2. Common side effects.\n"
        "3. A strict disclaimer that this is not medical advice.\n"
        "Keep it under 150 words."
    )
    try:
        return generate_text(prompt) or "No information available."
    except Exception:  # noqa: BLE001
        logger.exception("Error fetching medication info for %s", med_name)
        return "Could not retrieve medication information at this time."


def check_drug_interactions(new_med: str, existing_meds: list[str]) -> str:
    prompt = (
        f"The user is currently taking: {', '.join(existing_meds)}.\n"
        f"They are planning to add: {new_med}.\n\n"
        "Check for any known major drug interactions between these medications.\n\n"
        "Respond with:\n"
        '- "No major interactions found" if safe.\n'
        "- A short warning if there are interactions.\n"
        '- Always include: "Consult a doctor/pharmacist for verification."\n\n'
        "Keep it brief (max 3 sentences)."
    )
    try:
        return generate_text(prompt) or "Consult a healthcare provider."
    except Exception:  # noqa: BLE001
        logger.exception("Error checking interactions for %s", new_med)
        return "Consult a doctor for interaction checks."


def get_coping_strategy(anxiety_score: int, symptoms: list[str], notes: str) -> str:
    prompt = (
        f"The user has reported a high anxiety score of {anxiety_score}/10.\n"
        f"Reported Symptoms: {', '.join(symptoms) if symptoms else 'None specified'}.\n"
        f'User Notes: "{notes or "None"}".\n\n'
        "Provide a single, specific, evidence-based coping strategy (CBT or physiological) "
        "relevant to this state.\n"
        "- If they mention physical symptoms (e.g. racing heart, muscle tension), suggest a "
        "physiological tool (e.g. Box Breathing, PMR).\n"
        "- If they mention worry/thoughts, suggest a cognitive tool (e.g. 3Cs, Worry Postponement).\n\n"
        "Keep it under 3 sentences. Be warm, directive, and supportive."
    )
    try:
        return generate_text(prompt) or "Take a few deep breaths and focus on the present moment."
    except Exception:  # noqa: BLE001
        logger.exception("Error getting coping strategy")
        return "Focus on your breathing for a moment. Inhale for 4, exhale for 6."


def generate_progress_report(stats: dict[str, Any]) -> str:
    prompt = (
        "Generate a professional, empathetic weekly progress summary for a user managing "
        "Generalized Anxiety Disorder.\n\n"
        "Data:\n"
        f"- Average Anxiety Level (last 7 days): {stats.get('avg_anxiety')}/10\n"
        f"- Average Sleep: {stats.get('avg_sleep')} hours\n"
        f"- CBT Exercises Completed: {stats.get('cbt_count')}\n"
        f"- Medication Compliance: {stats.get('med_compliance')}%\n"
        f"- Latest GAD-7 Score: {stats.get('latest_gad7') or 'Not taken'}\n\n"
        "The report should:\n"
        "1. Highlight positive trends or efforts (e.g., consistency in logging, doing CBT).\n"
        "2. Gently point out areas for attention (e.g., sleep hygiene if sleep is low).\n"
        "3. Maintain a clinical but encouraging tone.\n"
        "4. Be formatted in Markdown.\n"
        "5. Keep it concise (under 200 words)."
    )
    try:
        return generate_text(prompt) or "Unable to generate report at this time."
    except Exception:  # noqa: BLE001
        logger.exception("Error generating report")
        return "An error occurred while generating your report."


def generate_workout_plan(level: str, equipment: list[str], goal: int) -> list[dict[str, Any]]:
    equip_str = ", ".join(equipment) if equipment else "Bodyweight only"
    prompt = (
        "Create a resistance training schedule for someone with anxiety.\n"
        f"Fitness Level: {level}\n"
        f"Equipment: {equip_str}\n"
        f"Weekly Goal: {goal} days per week.\n\n"
        "Return a JSON array of workout objects.\n"
        "Each object must have:\n"
        '- title (e.g., "Full Body A")\n'
        "- dayOfWeek (integer 0-6, distribute them logically for recovery)\n"
        "- exercises (array of objects with: name, sets (integer), reps (string))\n\n"
        "The exercises should be simple, effective, and require the specified equipment.\n"
        'Focus on "feeling strong" and "mind-body connection".'
    )
    try:
        return generate_json(prompt, WORKOUT_PLAN_SCHEMA)
    except Exception:  # noqa: BLE001
        logger.exception("Error generating workout plan")
        return []


def generate_data_insights(data_summary: str) -> list[dict[str, Any]]:
    prompt = (
        "Analyze this user health data summary and provide 3 short, specific, data-driven "
        "insights about correlations.\n\n"
        f"Data Summary:\n{data_summary}\n\n"
        "Return a JSON array of objects.\n"
        "Each object must have:\n"
        '- text: string (The insight text, e.g. "When you sleep >7h, anxiety drops")\n'
        "- relatedMetrics: array of strings (The specific metrics involved, exactly matching "
        "these keys: 'Sleep', 'Exercise', 'Social', 'Anxiety', 'Mood')\n\n"
        "Example:\n"
        '[{ "text": "Days with >30min exercise show 20% lower anxiety.", '
        '"relatedMetrics": ["Exercise", "Anxiety"] }]'
    )
    try:
        items = generate_json(prompt, INSIGHTS_SCHEMA)
    except Exception:  # noqa: BLE001
        logger.exception("Error generating insights")
        return [dict(item) for item in FALLBACK_INSIGHTS]
    return [{"text": item["text"], "related_metrics": item["relatedMetrics"]} for item in items]


def chat_with_therapist(message: str, history: list[dict[str, str]]) -> str:
    history_context = "\n".join(
        f"{'User' if turn['role'] == 'user' else 'Assistant'}: {turn['content']}" for turn in history[-6:]
    )
    prompt = (
        'You are a compassionate, evidence-based CBT assistant named "MindCalm AI".\n'
        "Your goal is to support users with Generalized Anxiety Disorder (GAD).\n\n"
        "Capabilities:\n"
        "1. Explain CBT concepts (3Cs, Cognitive Distortions, Exposure).\n"
        "2. Answer questions about anxiety symptoms and mechanisms.\n"
        "3. Offer supportive, non-judgmental encouragement.\n\n"
        "Constraints:\n"
        "- You are NOT a doctor or licensed therapist. Do not give medical diagnoses or "
        "medication advice.\n"
        "- If a user asks about meds, refer them to the Medication Hub or a doctor.\n"
        "- Keep responses concise (under 3-4 sentences usually) unless explaining a complex technique.\n"
        "- Use a warm, professional tone.\n\n"
        f"Conversation History:\n{history_context}\n\n"
        f"User: {message}\n"
        "Assistant:"
    )
    try:
        return generate_text(prompt) or "I'm sorry, I couldn't process that. Can you try again?"
    except Exception:  # noqa: BLE001
        logger.exception("Error in chat")
        return "I'm having trouble connecting right now. Please check your connection."
