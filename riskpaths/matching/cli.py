import json
import logging
import sys

from riskpaths.materiality import MaterialityError, parse_path
from riskpaths.matching.engine import MatchingEngine, report_input
from riskpaths.matching.summary import summarize
from riskpaths.taxonomy import default_store


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m riskpaths.matching.cli <materiality.json|materiality.csv>")
        return 2
    logging.basicConfig(level=logging.INFO, stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        entries = parse_path(args[0])
    except MaterialityError as e:
        print(json.dumps({"status": "rejected", "error": e.code, "message": str(e)}, indent=2))
        return 1

    matches = MatchingEngine(default_store()).match(entries)
    print(json.dumps({
        "status": "matched" if matches else "no_matches",
        **report_input(matches),
        "summary": summarize(matches).to_dict(),
    }, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
