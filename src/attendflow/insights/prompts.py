from __future__ import annotations

import json
from typing import Any, Mapping

ANALYST_PROMPT = """\
You are an AI analyst for a student attendance CRM system. Analyze the provided data and answer the user's query with actionable insights.

**System Data Summary:**
{context}

**User Query:** "{query}"

**Instructions:**
- Provide a clear, professional, and actionable response
- Use specific numbers and statistics from the data when available
- If analyzing trends, compare different time periods (today vs last 7 days vs last 30 days)
- Identify patterns, anomalies, or areas of concern
- Suggest actionable recommendations when appropriate
- Format your response in Markdown with proper headings, lists, and emphasis
- Be concise but thorough

**Note:** This data comes from the attendance system (works with both the demo store and a real database). Focus on the actual data provided, not assumptions.
"""

MISSING_KEY_MESSAGE = (
    "AI insights are unavailable because `GEMINI_API_KEY` is not set. "
    "Please add your Gemini API key to the `.env` file."
)

PROVIDER_FAILURE_MESSAGE = (
    "I encountered an issue analyzing the data. Please try again later. "
    "Make sure your Gemini API key is valid and has proper permissions."
)

EMPTY_RESPONSE_MESSAGE = "No insights could be generated at this time."


def render_prompt(context: Mapping[str, Any], query: str) -> str:
    return ANALYST_PROMPT.format(context=json.dumps(context, indent=2, default=str), query=query)
