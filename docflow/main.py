"""docflow: summarize a OneDrive file, mail it to yourself, schedule a follow-up."""

import asyncio
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from docflow.core.config import Settings, settings
from docflow.core.credentials import CredentialBroker, MsalTokenAcquirer, TokenRequest
from docflow.core.exceptions import ConfigurationError, DocflowError
from docflow.core.llm.clients import create_completion_services
from docflow.orchestrators.followup.graph import FollowUpOrchestrator
from docflow.orchestrators.followup.state import FollowUpState
from docflow.skills import create_registry
from docflow.skills.prompt_loader import validate_all_prompts
from docflow.tools.ms_graph import GraphClient

logger = logging.getLogger(__name__)


async def run(cfg: Settings) -> FollowUpState:
    cfg.validate_for_run()
    errors = validate_all_prompts(cfg.semantic_skills_dir)
    if errors:
        raise ConfigurationError("Invalid semantic skills: " + "; ".join(errors))

    logger.info("Starting follow-up run (env=%s)", cfg.app_env)
    tz = ZoneInfo(cfg.timezone)
    broker = CredentialBroker(MsalTokenAcquirer(cfg.msgraph_token_cache_path))
    completions = create_completion_services(cfg)

    async with GraphClient(cfg.msgraph_base_url, cfg.msgraph_timeout_seconds) as graph:
        registry = create_registry(
            graph,
            broker,
            TokenRequest.from_settings(cfg),
            completions,
            cfg.semantic_skills_dir,
        )
        orchestrator = FollowUpOrchestrator(
            registry,
            clock=lambda: datetime.now(tz),
            weekday=cfg.followup_weekday,
            hour=cfg.followup_hour,
        )
        return await orchestrator.invoke(cfg.onedrive_path_to_file)


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(settings))
    except DocflowError as e:
        logger.error("Follow-up run aborted: %s", e)
        sys.exit(1)
    except Exception:
        logger.exception("Follow-up run failed unexpectedly")
        sys.exit(1)


if __name__ == "__main__":
    main()
