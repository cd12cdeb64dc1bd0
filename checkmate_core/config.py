from typing import Optional

from pydantic import BaseModel, Field

from checkmate_core.runtime_config import EngineRuntimeConfig
from checkmate_core.tools.sonar_client import SONAR_MODEL, SONAR_URL


class CheckMateConfig(BaseModel):
    """
    Configuration for the Check Mate Core Engine.
    Decouples the engine from environment variables.
    """

    model_config = {"arbitrary_types_allowed": True}

    # Oracle
    api_key: Optional[str] = Field(None, description="Perplexity API key used when no settings store is given")
    oracle_url: str = Field(SONAR_URL, description="Chat-completions endpoint of the verification oracle")
    oracle_model: str = Field(SONAR_MODEL, description="Oracle model identifier")

    # Verification Settings
    confidence_threshold: Optional[float] = Field(
        None, description="Minimum confidence to trust a verdict outright (runtime default when unset)"
    )

    runtime: EngineRuntimeConfig = Field(default_factory=EngineRuntimeConfig.load_from_env)
