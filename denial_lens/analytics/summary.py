"""
Narrative summary request/response handling.

The summary itself comes from a chat model called by the surrounding
application; this module builds the messages it is sent and cleans the reply.
"""

import json
import re
from typing import Any, Dict, List, Mapping, Sequence

NO_SUMMARY = "No summary could be generated"

SUMMARY_SYSTEM_PROMPT = """\
You are an AI assistant specialized in analyzing healthcare claim data and providing insights.
You will be given extracted information from a denial letter and matched claims from a database.
Provide a concise, professional summary of the analysis that includes:

1. Key information about the denial (date, patient, drug, reason)
2. Patterns observed in similar claims (approval rates, common payers, demographics)
3. Actionable insights or recommendations based on the data

Format your response in clear paragraphs with bullet points where appropriate.
Keep your response focused, informative, and under 300 words.
"""

_FENCED = re.compile(r"```(?:json|markdown)?\s*([\s\S]*?)\s*```")


def build_summary_messages(
    fields: Mapping[str, Any],
    claims: Sequence[Mapping[str, Any]],
) -> List[Dict[str, str]]:
    """Chat messages asking for a narrative over the letter and its matched claims."""
    user_message = (
        "Here is the extracted information from the denial letter:\n"
        f"{json.dumps(fields, indent=2, default=str)}\n\n"
        f"Here are the matched claims from our database ({len(claims)} claims):\n"
        f"{json.dumps([dict(c) for c in claims], indent=2, default=str)}\n\n"
        "Please provide a summary of this analysis."
    )
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {"role": "user", "content": user_message},
    ]


def clean_summary_text(content: str) -> str:
    """Strip a surrounding code fence from the model's reply."""
    if not content or not content.strip():
        return NO_SUMMARY
    fenced = _FENCED.search(content)
    if fenced and fenced.group(1):
        return fenced.group(1).strip()
    return content.strip()
