"""
Artifact: planner_service/study_planner/clients/llm_client.py
Purpose: Wraps LangChain chat model construction for the OpenAI-compatible AI gateway.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- `langchain_openai` package is installed; the gateway credential is supplied by the caller.
Inputs:
- Acceptable: Model name string, numeric temperature, gateway URL, API key, and timeout values.
- Unacceptable: Empty API keys or non-numeric generation parameters.
Postconditions:
- Returns a configured ChatOpenAI client with SDK-level retries disabled.
Returns:
- `ChatOpenAI` object.
Errors/Exceptions:
- Underlying provider/client initialization exceptions for invalid setup.
"""

from langchain_openai import ChatOpenAI


def build_gateway_chat_client(
    model_name: str,
    temperature: float,
    base_url: str,
    api_key: str,
    timeout: float,
) -> ChatOpenAI:
    """Create a ChatOpenAI client; retry policy is owned by the plan orchestrator."""
    return ChatOpenAI(
        model=model_name,
        temperature=temperature,
        base_url=base_url,
        api_key=api_key,
        timeout=timeout,
        max_retries=0,
    )
