from __future__ import annotations

SUMMARIZER_SYSTEM_PROMPT = (
    "You are a research assistant. Summarize the following search results into a concise, "
    "informative summary. Keep concrete facts, figures and dates; refer to sources by their "
    "bracketed number."
)

NO_RESULTS_SUMMARY = "No search results available."
SEARCH_UNAVAILABLE_SUMMARY = "Search unavailable. Proceeding with existing knowledge."
