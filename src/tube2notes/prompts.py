"""
LLM prompts used throughout the application.

All prompts are centralized here for easy maintenance and consistency.
The user-configurable summary prompt is a plain preamble; the templates below
wrap it around transcript or summary content.
"""

# ============================================================================
# System Message
# ============================================================================

SUMMARY_SYSTEM_MESSAGE = (
    "You are a helpful assistant that creates concise summaries of video transcripts."
)

# ============================================================================
# Single-shot Summary
# ============================================================================

SINGLE_SHOT_TEMPLATE = """{summary_prompt}

Transcript:
{transcript}"""

# ============================================================================
# Chunked Summary
# ============================================================================

CHUNK_SUMMARY_TEMPLATE = """Summarize part {part} of {total} of a video transcript. Be terse: list only the key points made in this part, as short bullet points, without an introduction or conclusion.

Transcript part {part}/{total}:
{chunk}"""

COMBINE_SUMMARIES_TEMPLATE = """{summary_prompt}

The transcript was too long to summarize at once, so each part was summarized separately. Below are the part summaries in order. Merge them into one cohesive summary of the whole video, removing repetition.

Part summaries:
{summaries}"""

# ============================================================================
# Placeholder Responses
# ============================================================================

# Responses that mean the model produced no real summary
PLACEHOLDER_SUMMARY = "No summary available"
PLACEHOLDER_MARKERS = ("Please provide the video transcript",)
