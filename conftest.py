"""Global pytest configuration."""

import os

# No model key in tests: the deterministic stub answers instead of OpenAI
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("TEMPLATE_SEED", "7")
