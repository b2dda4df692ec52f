"""
run_brand_check.py: one brand analysis from the command line, no web server.

Provider keys come from the environment / .env (OPENAI_API_KEY,
ANTHROPIC_API_KEY, GOOGLE_API_KEY, PERPLEXITY_API_KEY). Nothing is stored.

Usage:
    python run_brand_check.py --brand Acme --industry "project management" \
        --website https://acme.com --location Berlin --keyword "remote teams"
"""

import argparse
import asyncio
import json
import logging
import sys

from app.core.exceptions import AnalysisFailedError, NoProvidersConfiguredError
from app.core.logging import setup_logging
from app.prompt_engine.types import BrandConfig
from app.services.brand_analysis import run_brand_analysis
from app.services.provider_keys import configured_providers, resolve_keys

logger = logging.getLogger("brand_check")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure a brand's visibility across LLM platforms")
    parser.add_argument("--brand", required=True, help="Brand name as it appears in answers")
    parser.add_argument("--industry", required=True)
    parser.add_argument("--website", default="", help="Brand website (informational)")
    parser.add_argument("--location", default=None, help='Market, e.g. "Berlin"; omit or "Global" for none')
    parser.add_argument("--keyword", action="append", default=[], dest="keywords", help="Repeat for several")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    return parser.parse_args(argv)


def _print_table(outcome) -> None:
    print("\n" + "=" * 60)
    print(f"  Overall score: {outcome.overall_score}/100")
    print("=" * 60)
    print(f"  {'Platform':14s} {'Score':>5s} {'Rank':>5s} {'Mentions':>8s}  Trend   OK/Failed")
    for r in outcome.rankings:
        rank = str(r.rank) if r.rank is not None else "-"
        print(
            f"  {r.logo} {r.platform:12s} {r.score:5d} {rank:>5s} {r.mentions:8d}  "
            f"{r.trend:7s} {r.queries_succeeded}/{r.queries_failed}"
        )
    for platform, error in outcome.platform_errors.items():
        print(f"  ✗ {platform}: {error}")

    if outcome.recommendations:
        print("\n  Recommendations:")
        for rec in outcome.recommendations:
            print(f"    - {rec}")
    print()


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()

    keys = resolve_keys(None)
    logger.info("Providers with keys: %s", configured_providers(None) or "none")

    config = BrandConfig(
        website_url=args.website,
        brand_name=args.brand,
        industry=args.industry,
        location=args.location,
        keywords=args.keywords,
    )

    try:
        outcome = await run_brand_analysis(config, keys)
    except (NoProvidersConfiguredError, AnalysisFailedError) as e:
        print(f"\n  ❌ {e.detail}", file=sys.stderr)
        return 1

    if args.json:
        print(
            json.dumps(
                {
                    "overall_score": outcome.overall_score,
                    "rankings": outcome.llm_results(),
                    "platform_errors": outcome.platform_errors,
                    "analyzed_prompts": outcome.analyzed_prompts,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        _print_table(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
