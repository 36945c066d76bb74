"""Response schema for structured campaign copy."""

from google.genai import types

SUBJECT_LINES = "subjectLines"
BODY_COPY = "bodyCopy"
IMAGE_PROMPT = "imagePrompt"

CAMPAIGN_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        SUBJECT_LINES: types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="Three catchy email subject lines.",
        ),
        BODY_COPY: types.Schema(
            type=types.Type.STRING,
            description="The main email body content in Markdown format.",
        ),
        IMAGE_PROMPT: types.Schema(
            type=types.Type.STRING,
            description="A detailed prompt to generate a marketing image for this email.",
        ),
    },
    required=[SUBJECT_LINES, BODY_COPY, IMAGE_PROMPT],
)
