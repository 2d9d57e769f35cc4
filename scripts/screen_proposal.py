#!/usr/bin/env python3
"""
Screen a local markdown proposal through the evaluation service.

Usage:
    python scripts/screen_proposal.py path/to/proposal.md --title "My proposal" --save-output
"""

import argparse
import asyncio
import json
import os
import sys
from dataclasses import replace
from datetime import datetime
from typing import Optional

# Add the parent directory to the path to import from app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import config
from app.services.screening import (
    EvaluationRequester,
    ScreeningError,
    sanitize_proposal_input,
)


def title_from_markdown(content: str, fallback: str) -> str:
    """Use the first level-one heading as the title, if there is one."""
    for line in content.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return fallback


async def screen_file(
    path: str,
    title: Optional[str] = None,
    model: Optional[str] = None,
    save_output: bool = False,
) -> int:
    """Screen one proposal file and print the evaluation. Returns an exit code."""
    with open(path, encoding="utf-8") as f:
        raw_content = f.read()

    stem = os.path.splitext(os.path.basename(path))[0]
    raw_title = title or title_from_markdown(raw_content, stem)

    evaluator_config = replace(config.evaluator, model=model) if model else config.evaluator
    requester = EvaluationRequester.from_config(evaluator_config)

    print("\n" + "=" * 80)
    print(f"Screening '{raw_title}' with model: {requester.model}")

    try:
        proposal = sanitize_proposal_input(
            raw_title,
            raw_content,
            max_title_length=config.sanitizer.max_title_length,
            max_content_length=config.sanitizer.max_content_length,
        )
        evaluation = await requester.evaluate(proposal.title, proposal.content)
    except ScreeningError as e:
        print(f"❌ Screening failed: {e}")
        return 1

    result = evaluation.to_response()

    print("\n" + "=" * 80)
    print("Evaluation Result:")
    print(json.dumps(result, indent=2))
    print(
        f"\nPass: {evaluation.overall_pass} | "
        f"Quality: {evaluation.quality_score * 100:.0f}% | "
        f"Attention: {evaluation.attention_score * 100:.0f}%"
    )

    if save_output:
        output_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
            "evals",
        )
        os.makedirs(output_dir, exist_ok=True)
        output_filename = (
            f"screening_{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        )
        output_path = os.path.join(output_dir, output_filename)

        output_data = {
            "timestamp": datetime.now().isoformat(),
            "model": requester.model,
            "source_file": os.path.abspath(path),
            "title": proposal.title,
            "evaluation": result,
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(output_data, f, indent=2)

        print(f"\nSaved evaluation output to: {output_path}")

    return 0


def main():
    """Main function to handle command line arguments."""
    parser = argparse.ArgumentParser(description="Screen a proposal markdown file")
    parser.add_argument("path", help="Path to the proposal markdown file")
    parser.add_argument(
        "--title",
        help="Proposal title (defaults to the first '# ' heading, then the file name)",
    )
    parser.add_argument(
        "--model",
        help="Optional model override (e.g., 'openai/gpt-4.1', 'anthropic/claude-sonnet-4')",
    )
    parser.add_argument(
        "--save-output",
        action="store_true",
        help="Save the evaluation to a JSON file in the evals/ directory",
    )

    args = parser.parse_args()

    sys.exit(asyncio.run(screen_file(args.path, args.title, args.model, args.save_output)))


if __name__ == "__main__":
    main()
