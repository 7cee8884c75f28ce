"""Debug script to run the GitHub example flow in a visible browser."""

import asyncio
import logging
import sys
from pathlib import Path

# Fix Windows console encoding
sys.stdout.reconfigure(encoding='utf-8', errors='replace')
sys.stderr.reconfigure(encoding='utf-8', errors='replace')

# Enable debug logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

from fluxo_ia.core.runner import run_flow
from fluxo_ia.tools.browser import PlaywrightDriver


async def test_github_flow():
    """Run exemplos/github.txt against the profile page."""
    url = "https://github.com/Lucasdoreac"
    flow = (Path(__file__).parent / "exemplos" / "github.txt").read_text(encoding="utf-8")

    print(f"\n{'='*60}")
    print(f"Fluxo-IA Debug Run")
    print(f"URL: {url}")
    print(f"{'='*60}\n")

    try:
        results, runner = await run_flow(
            PlaywrightDriver(headless=False),
            flow,
            url,
            {
                "captureScreenshots": True,
                "captureLogs": True,
                "reportFormat": "html",
                "reportDir": "./relatorios",
                "tempoEspera": 500,
                "pararNaFalha": False,
            },
        )
    except Exception as e:
        print(f"\n*** EXCEPTION: {type(e).__name__}: {e} ***")
        import traceback
        traceback.print_exc()
        return 1

    for record in results.steps:
        marker = "OK  " if record.succeeded else "FAIL"
        print(f"  [{marker}] {record.group} | {record.description}")
        if record.error:
            print(f"         {record.error}")

    print(f"\n{'='*60}")
    print(f"Passed: {results.success_count}  Failed: {results.failure_count}")
    print(f"Total time: {results.total_duration_ms}ms")
    print(f"Report: {runner.report_path}")
    print(f"{'='*60}\n")

    return 1 if results.failure_count else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(test_github_flow()))
