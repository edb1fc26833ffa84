"""Prompt construction from a template and a snapshot."""

import math

from aihealth.schemas.snapshot import HealthSnapshot
from aihealth.services.serializer import serialize_snapshot

PLACEHOLDER = "{{JSON}}"

DEFAULT_TEMPLATE = """You are looking at a snapshot of my health data from my phone and watch.

Give me a short, friendly check-in for today:
1. How recovered am I? Compare HRV, resting heart rate and respiration with their 7-day baselines.
2. How did I sleep last night compared with my weekly average?
3. How active have I been, and how does my training load over the last 7, 14 and 30 days look?
4. One or two concrete suggestions for today (training intensity, rest, sleep timing).

Only use the values that are present. Do not guess missing values and do not give medical diagnoses.
Keep the answer under 200 words.

Health data (JSON):
{{JSON}}
"""

# Rough average for English text with the GPT tokenizers
CHARS_PER_TOKEN = 4


def normalize_trailing_newline(text: str) -> str:
    """Return ``text`` ending in exactly one newline."""
    return text.rstrip("\n") + "\n"


def apply_template(template: str, json_text: str) -> str:
    """Substitute the first placeholder and normalise the trailing newline.

    A template without the placeholder is returned as-is; the JSON is not
    appended anywhere else.
    """
    return normalize_trailing_newline(template.replace(PLACEHOLDER, json_text, 1))


def estimate_tokens(text: str) -> int:
    if not text:
        return 0
    return max(1, math.ceil(len(text) / CHARS_PER_TOKEN))


class PromptBuilder:
    def __init__(self, template: str = DEFAULT_TEMPLATE):
        self.template = template or DEFAULT_TEMPLATE

    def prompt(self, snapshot: HealthSnapshot) -> str:
        return apply_template(self.template, serialize_snapshot(snapshot))
