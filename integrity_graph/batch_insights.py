"""
Batch Insight Runner

CLI script to derive integrity insights for a saved network payload, e.g. one
exported from the dashboard for an audit file.

Usage:
    # Insights + stats as JSON on stdout
    python -m integrity_graph.batch_insights --input payload.json

    # Display order (critical first) and an SVG snapshot of the layout
    python -m integrity_graph.batch_insights --input payload.json --ranked --svg network.svg

The payload is the same JSON object the dashboard passes to the map:
{"nodes": [...], "edges": [...], "aiCausalAnalysis": {...}}.

License: Proprietary
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from integrity_graph.config import Settings
from integrity_graph.graph.models import PayloadError
from integrity_graph.network_map import EvaluatorNetworkMap

logger = logging.getLogger(__name__)


def run_batch(input_path: Path, svg_path: Optional[Path] = None, ranked: bool = False) -> Dict[str, Any]:
    """Load a payload, derive insights and optionally write an SVG snapshot.

    Returns:
        Dict with success flag, insights, stats and summary (or error).
    """
    result: Dict[str, Any] = {"input": str(input_path), "success": False}

    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
        network_map = EvaluatorNetworkMap(data, settings=Settings.from_env())
    except (OSError, json.JSONDecodeError, PayloadError) as e:
        logger.error(f"Could not load payload from {input_path}: {e}", exc_info=True)
        result["error"] = str(e)
        return result

    insights = network_map.ranked_insights if ranked else network_map.insights
    result["insights"] = [i.to_dict() for i in insights]
    result["stats"] = network_map.stats
    result["summary"] = network_map.summary

    if svg_path is not None:
        svg_path.write_text(network_map.to_svg(), encoding="utf-8")
        result["svg"] = str(svg_path)
        logger.info(f"SVG snapshot written to {svg_path}")

    logger.info(
        f"Derived {len(insights)} insights for {result['stats']['evaluator_count']} evaluators, "
        f"{result['stats']['vendor_count']} vendors"
    )
    result["success"] = True
    return result


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Derive integrity insights for an evaluator network payload."
    )
    parser.add_argument(
        "--input",
        required=True,
        type=Path,
        help="Path to the JSON payload ({nodes, edges, aiCausalAnalysis?})",
    )
    parser.add_argument(
        "--svg",
        type=Path,
        default=None,
        help="Write an SVG snapshot of the default layout to this path",
    )
    parser.add_argument(
        "--ranked",
        action="store_true",
        help="Order insights by severity and confidence instead of generation order",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    result = run_batch(args.input, svg_path=args.svg, ranked=args.ranked)
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))

    if not result.get("success", False):
        sys.exit(1)


if __name__ == "__main__":
    main()
