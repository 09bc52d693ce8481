import argparse
import json
from pathlib import Path
from typing import Any, Dict

from what_should_i_do.app.run import analyze_files, build_orchestrator
from what_should_i_do.config.logging import configure_logging
from what_should_i_do.config.profiles import PROFILES
from what_should_i_do.config.settings import load_settings
from what_should_i_do.extractors.highlight import strip_markup


def print_result(entry: Dict[str, Any]) -> None:
    """Pretty print one analyzed file."""
    print("----")
    print(f"File:      {entry['path']}")
    if "error" in entry:
        print(f"Error:     [{entry['error']['code']}] {entry['error']['message']}")
        return

    result = entry["result"]
    print(f"Source:    {entry['source']}")
    print(f"Urgency:   {result['urgency']}")
    print(f"Next step: {result['nextStep']}")
    for action in result["actions"]:
        print(f"  action:   {action}")
    for deadline in result["deadlines"]:
        print(f"  deadline: {deadline}")
    for part in result["confusingParts"]:
        print(f"  unclear:  {part['sentence']} ({part['explanation']})")
    print(f"Summary:   {strip_markup(result['summary'])}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze plain-text files and print what to do about them.")
    parser.add_argument("paths", nargs="+", type=Path, help="Plain-text files to analyze")
    parser.add_argument("--fast", action="store_true", help="Rule-based analysis only")
    parser.add_argument("--profile", choices=sorted(PROFILES), default=None, help="Rule profile (default from env)")
    parser.add_argument("--json", action="store_true", help="Print the full JSON report")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level, settings.log_file)
    orchestrator = build_orchestrator(settings, profile=args.profile)

    def progress(step: str, event: Dict[str, Any]) -> None:
        if step == "analyzing" and not args.json:
            print(f"[run] {event.get('detail')}")

    try:
        report = analyze_files(args.paths, orchestrator=orchestrator, fast=args.fast, progress_cb=progress)
    finally:
        orchestrator.shutdown()

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return

    for entry in report["results"]:
        print_result(entry)
    summary = report["summary"]
    print(f"[done] analyzed={summary['analyzed']} remote={summary['remote']} errors={summary['errors']}")


if __name__ == "__main__":
    main()
