"""
Tool: Roadmap Generator
Purpose: Turn a user's situation into a four-phase recovery plan using an LLM

The model plays an experienced case manager. A few hard rules are baked
into the prompt because nothing else works until they are handled: no ID
means the first task is getting one, no bank account means opening a
second-chance account, and a housing worry makes Phase 1 about shelter.

Usage:
    python -m lifeos.roadmap.generator --goal "Stable job" --worry Housing \
        --constraint "No ID" --zip 08096

Dependencies:
    - openai (chat completions in JSON mode)
    - pydantic (schema validation of the model output)

Output:
    JSON RoadmapResult; ``fallback`` is true when the canned plan was used
"""

import argparse
import json
import logging
import sys
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from lifeos.config import get_secret, get_section

from . import (
    CONSTRAINT_NO_BANK_ACCOUNT,
    CONSTRAINT_NO_ID,
    DEFAULT_MODEL,
    PHASE_NAMES,
    WORRY_HOUSING,
)
from .models import (
    Roadmap,
    RoadmapPhase,
    RoadmapRequest,
    RoadmapResult,
    RoadmapTask,
    SuggestedResource,
)


logger = logging.getLogger(__name__)

USER_PROMPT = "Generate the recovery roadmap based on the user's situation."


def build_system_prompt(request: RoadmapRequest) -> str:
    """Build the case-manager system prompt for a request."""
    constraints = ", ".join(request.constraints) if request.constraints else "None"
    schema = json.dumps(Roadmap.model_json_schema(), indent=2)

    return f"""ROLE: You are an expert Case Manager and Life Strategist. Your goal is to take a user's current crisis or situation and build a step-by-step bridge to their 1-year goal. You must be empathetic, realistic, and highly practical.

LOGIC RULES:
1. ID is Key: If constraints includes "{CONSTRAINT_NO_ID}", the VERY FIRST task in Phase 1 must be "Locate Birth Certificate or Apply for State ID." No other progress is possible without this.
2. Bank Account: If constraints includes "{CONSTRAINT_NO_BANK_ACCOUNT}", Phase 1 must include "Open a Second-Chance Checking Account" (suggest banks like Chime or local credit unions).
3. Housing First: If currentWorry is "{WORRY_HOUSING}", Phase 1 focuses entirely on shelter, housing vouchers, and rapid re-housing programs.
4. Tone: Task descriptions should be encouraging. Instead of "Fix Debt," use "Review Financial Landscape."

INPUT CONTEXT:
- One Year Goal: {request.one_year_goal}
- Current Worry: {request.current_worry}
- Constraints: {constraints}
- Zip Code: {request.zip_code or "Unknown"}

OUTPUT:
Generate a {len(PHASE_NAMES)}-Phase Plan ({", ".join(PHASE_NAMES)}).
Respond with a single JSON object matching this JSON schema:
{schema}
"""


def fallback_roadmap(zip_code: str = "") -> Roadmap:
    """Canned stabilization plan used when the model is unavailable."""
    location = zip_code or "your area"
    return Roadmap(
        phases=[
            RoadmapPhase(
                phase_name="Phase 1: Stabilization (Days 1-30)",
                goal="Secure the basics and stop the bleeding.",
                tasks=[
                    RoadmapTask(
                        title="Locate Birth Certificate",
                        description="You need this to apply for your State ID. Check with family or order online.",
                        category="admin",
                        is_urgent=True,
                    ),
                    RoadmapTask(
                        title="Open Second-Chance Bank Account",
                        description="Chime or a local credit union will accept you without a perfect history.",
                        category="financial",
                        is_urgent=True,
                    ),
                    RoadmapTask(
                        title="Apply for Emergency Housing Voucher",
                        description="Visit the local housing authority to get on the waitlist immediately.",
                        category="admin",
                        is_urgent=True,
                    ),
                ],
            ),
            RoadmapPhase(
                phase_name="Phase 2: Foundation (Months 2-3)",
                goal="Build the systems for growth.",
                tasks=[
                    RoadmapTask(
                        title="Resume Workshop",
                        description="Update your resume to highlight your skills and address gaps.",
                        category="admin",
                        is_urgent=False,
                    ),
                ],
            ),
        ],
        suggested_resources=[
            SuggestedResource(
                query=f"Food pantries in {location}",
                reason="To save cash for other stabilization needs.",
            ),
        ],
    )


def _extract_json(text: str) -> str:
    """Strip markdown fences some models wrap around JSON."""
    text = text.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif text.startswith("```"):
        text = text.split("```")[1].split("```")[0]
    return text.strip()


def generate_roadmap(request: RoadmapRequest, client: OpenAI | None = None) -> RoadmapResult:
    """
    Generate a recovery roadmap for a user's situation.

    Args:
        request: Goal, worry, constraints and zip code
        client: OpenAI client (built from OPENAI_API_KEY when omitted)

    Returns:
        RoadmapResult - success=False only when the API key is missing;
        any model failure yields the fallback plan with fallback=True
    """
    if client is None:
        api_key = get_secret("OPENAI_API_KEY")
        if not api_key:
            logger.error("OPENAI_API_KEY is missing from environment variables.")
            return RoadmapResult(
                success=False,
                error="Server Error: OPENAI_API_KEY is missing. Please check .env",
            )
        client = OpenAI(api_key=api_key)

    config = get_section("roadmap")
    model = config.get("model", DEFAULT_MODEL)
    max_tokens = config.get("max_tokens", 2048)

    try:
        response = client.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": build_system_prompt(request)},
                {"role": "user", "content": USER_PROMPT},
            ],
        )
        content = response.choices[0].message.content or ""
        roadmap = Roadmap.model_validate_json(_extract_json(content))
        logger.info(f"Generated roadmap with {len(roadmap.phases)} phases")
        return RoadmapResult(success=True, data=roadmap)

    except ValidationError as e:
        logger.error(f"Roadmap response failed schema validation: {e}")
    except Exception as e:
        logger.error(f"Error generating roadmap: {e}")

    logger.info("Falling back to canned roadmap")
    return RoadmapResult(success=True, data=fallback_roadmap(request.zip_code), fallback=True)


def main():
    parser = argparse.ArgumentParser(description="Roadmap Generator")
    parser.add_argument("--goal", required=True, help="One year goal")
    parser.add_argument("--worry", required=True, help="Current worry (e.g. Housing)")
    parser.add_argument(
        "--constraint", action="append", default=[], help="Constraint tag (repeatable)"
    )
    parser.add_argument("--zip", default="", help="Zip code")

    args = parser.parse_args()

    result = generate_roadmap(
        RoadmapRequest(
            one_year_goal=args.goal,
            current_worry=args.worry,
            constraints=args.constraint,
            zip_code=args.zip,
        )
    )

    output: dict[str, Any] = result.model_dump()
    print(json.dumps(output, indent=2))
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
