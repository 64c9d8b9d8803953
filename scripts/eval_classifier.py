#!/usr/bin/env python3
"""Score the keyword category classifier against a labeled JSONL file.

Each row reports the stems that fired and whether the category was decided
by a single keyword match, by priority order (several categories matched),
or by falling back to general.
"""
from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path
from typing import Any


def _bootstrap_pythonpath() -> None:
    import sys

    src = Path(__file__).resolve().parents[1] / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


_bootstrap_pythonpath()

from mockup_forge.design.categories import CATEGORY_PROFILES, classify, keyword_hits  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate the keyword category classifier.")
    parser.add_argument("--input", default="eval/classifier_labeled.sample.jsonl", help="JSONL rows: idea, gold_category, optional note.")
    parser.add_argument("--output-md", default="", help="Write the Markdown report here instead of stdout.")
    parser.add_argument("--output-json", default="", help="Also write rows and summary as JSON.")
    return parser.parse_args(argv)


def load_rows(path: Path) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        row = json.loads(line)
        idea = str(row.get("idea", "")).strip()
        gold = str(row.get("gold_category", "")).strip().lower()
        if not idea or gold not in CATEGORY_PROFILES:
            raise ValueError(f"line {line_no}: need a non-empty idea and a known gold_category, got {gold!r}")
        rows.append({"idea": idea, "gold_category": gold, "note": str(row.get("note", "")).strip()})
    if not rows:
        raise ValueError(f"{path}: no rows")
    return rows


def score_row(row: dict[str, str]) -> dict[str, Any]:
    hits = keyword_hits(row["idea"])
    if not hits:
        decided_by = "fallback"
    elif len(hits) > 1:
        decided_by = "priority"
    else:
        decided_by = "keyword"
    predicted = classify(row["idea"]).id
    return {
        **row,
        "pred_category": predicted,
        "correct": predicted == row["gold_category"],
        "decided_by": decided_by,
        "stems": {category: list(stems) for category, stems in hits.items()},
    }


def summarize(scored: list[dict[str, Any]]) -> dict[str, Any]:
    support = Counter(row["gold_category"] for row in scored)
    hits = Counter(row["gold_category"] for row in scored if row["correct"])
    correct = sum(hits.values())
    return {
        "total": len(scored),
        "correct": correct,
        "accuracy": correct / len(scored),
        "recall": {category: hits[category] / count for category, count in sorted(support.items())},
        "decided_by": dict(Counter(row["decided_by"] for row in scored)),
    }


def render_markdown(summary: dict[str, Any], scored: list[dict[str, Any]]) -> str:
    lines = [
        "# Category Classifier Eval",
        "",
        f"accuracy {summary['correct']}/{summary['total']} ({summary['accuracy']:.1%})",
        "",
        "| category | recall |",
        "|---|---:|",
    ]
    lines += [f"| {category} | {recall:.1%} |" for category, recall in summary["recall"].items()]
    lines += ["", "| idea | gold | pred | decided by | stems |", "|---|---|---|---|---|"]
    for row in scored:
        mark = "" if row["correct"] else " **miss**"
        stems = "; ".join(f"{category}: {', '.join(found)}" for category, found in row["stems"].items()) or "-"
        lines.append(
            f"| {row['idea']} | {row['gold_category']} | {row['pred_category']}{mark} | {row['decided_by']} | {stems} |"
        )
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    scored = [score_row(row) for row in load_rows(Path(args.input))]
    summary = summarize(scored)
    report = render_markdown(summary, scored)

    if args.output_md:
        Path(args.output_md).write_text(report, encoding="utf-8")
    else:
        print(report, end="")
    if args.output_json:
        Path(args.output_json).write_text(
            json.dumps({"summary": summary, "rows": scored}, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    return 0 if summary["correct"] == summary["total"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
