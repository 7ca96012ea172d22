"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Content store (SQLite file, relative to project root unless absolute)
CONTENT_DB_PATH: str = os.getenv("CONTENT_DB_PATH", "data/content.db").strip() or "data/content.db"

# Article links rendered in answers: [Title](/articles/{id})
ARTICLE_PATH_PREFIX: str = (
    os.getenv("ARTICLE_PATH_PREFIX", "/articles").strip().rstrip("/") or "/articles"
)

# API timeouts (seconds)
LLM_API_TIMEOUT: float = float(os.getenv("LLM_API_TIMEOUT", "60") or 60)
AGENT_TIMEOUT_SECONDS: float = float(os.getenv("AGENT_TIMEOUT_SECONDS", "90") or 90)

# Agent tool loop
MAX_AGENTIC_ROUNDS: int = int(os.getenv("MAX_AGENTIC_ROUNDS", "8") or 8)
AGENT_MAX_TOKENS: int = int(os.getenv("AGENT_MAX_TOKENS", "1024") or 1024)

# Minimum length of a question submitted through the HTTP form
MIN_QUESTION_LENGTH: int = 10

# OpenAI (agent LLM). When set, the agent uses OpenAI instead of Hugging Face.
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Hugging Face router (fallback when OPENAI_API_KEY is not set). Needs a chat model with tool support.
HF_API_KEY: str = os.getenv("HF_API_KEY", "").strip()
HF_CHAT_URL: str = (
    os.getenv("HF_CHAT_URL", "https://router.huggingface.co/v1/chat/completions").strip()
    or "https://router.huggingface.co/v1/chat/completions"
)
HF_LLM_MODEL: str = (
    os.getenv("HF_LLM_MODEL", "meta-llama/Llama-3.3-70B-Instruct").strip()
    or "meta-llama/Llama-3.3-70B-Instruct"
)
