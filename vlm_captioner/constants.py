"""All magic values live here — no inline literals anywhere else."""

# Model defaults
DEFAULT_MODEL = "gpt-5"
MAX_COMPLETION_TOKENS = 300

# Prompts
SYSTEM_PROMPT = (
    "You are an image captioning assistant, you provide clear and concise "
    "captions for images. You respond only with the caption."
)
USER_PROMPT = (
    "Provide a clear and concise caption suitable for screen readers "
    "for the following image:"
)

# Chat message roles / part types
ROLE_SYSTEM = "system"
ROLE_USER = "user"
PART_TEXT = "text"
PART_IMAGE_URL = "image_url"

# Data URL template: mime type, base64 payload
DATA_URL_TEMPLATE = "data:%s;base64,%s"

# Content sniffing
SNIFF_LEN = 512
MIME_TEXT = "text/plain; charset=utf-8"
MIME_UNKNOWN = "application/octet-stream"

# Error messages
ERR_FILE_READ = "failed to read image file: %s"
ERR_COMPLETION = "failed to create chat completion: %s"
ERR_NO_CHOICES = "no choices returned from API"

# Log messages
MSG_CAPTIONING = "→ %s (%s, %d bytes) via %s"
MSG_CAPTION_FAILED = "failed to get caption for %s: %s"
MSG_CAPTION_OK = "✓ %s (%.1fs)"

# CLI
PROG_NAME = "vlm-image-captioner"
CLI_DESCRIPTION = "A CLI tool to caption images using vision language models."
CSV_HEADER = ("imagepath", "caption")
MULTI_LINE_FORMAT = "%s: %s"

# Environment defaults
DEFAULT_LOG_LEVEL = "WARNING"
