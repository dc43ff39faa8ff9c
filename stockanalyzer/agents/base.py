"""Base utilities for AI agents.

This module provides common utilities for creating and running AI agents
using the OpenAI Agents SDK.
"""

import logging
import os
from typing import Optional

# Disable tracing to avoid noisy 503 errors from telemetry
os.environ.setdefault("OPENAI_AGENTS_DISABLE_TRACING", "1")

from agents import Agent, Runner

logger = logging.getLogger(__name__)

# Default model to use for agents
DEFAULT_MODEL = "gpt-5.2"


def get_model(default: Optional[str] = None) -> str:
    """Get the model to use for agents.

    Checks OPENAI_MODEL environment variable, falls back to ``default``
    and then to DEFAULT_MODEL.

    Returns:
        Model name string.
    """
    return os.environ.get("OPENAI_MODEL") or default or DEFAULT_MODEL


def get_api_key() -> Optional[str]:
    """Get the OpenAI API key.

    Returns:
        API key string or None if not configured.
    """
    return os.environ.get("OPENAI_API_KEY")


def create_agent(
    name: str,
    instructions: str,
    model: Optional[str] = None,
) -> Agent:
    """Create a tool-less agent with the given instructions.

    Args:
        name: Name of the agent.
        instructions: System instructions for the agent.
        model: Optional model override. Uses default if not specified.

    Returns:
        Configured Agent instance.
    """
    agent_model = model or get_model()

    return Agent(
        name=name,
        instructions=instructions,
        model=agent_model,
    )


async def run_agent_async(agent: Agent, message: str) -> str:
    """Run an agent asynchronously and return the response.

    Args:
        agent: The agent to run.
        message: User message to send to the agent.

    Returns:
        Agent's response as a string.
    """
    logger.info("Running agent %s with model %s", agent.name, agent.model)
    result = await Runner.run(agent, message)
    return result.final_output
