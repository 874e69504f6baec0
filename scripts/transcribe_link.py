import argparse
import json
import logging
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from cliprecipe.app.config import settings
from cliprecipe.app.domain.errors import RecipePipelineError
from cliprecipe.app.infra.store.memory import InMemoryRecipeStore
from cliprecipe.app.main import build_pipeline


def main() -> int:
    parser = argparse.ArgumentParser(description="Quick link-to-recipe smoke test")
    parser.add_argument("url", nargs="?", default="https://www.youtube.com/watch?v=_nJw6nnQms8")
    parser.add_argument("--lang", default=None, help="Language hint, e.g. en")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    pipeline = build_pipeline(settings, InMemoryRecipeStore())
    try:
        record = pipeline.process(args.url, args.lang)
    except RecipePipelineError as exc:
        print(f"failed: code={exc.code} stage={exc.stage} error={exc}", file=sys.stderr)
        return 1

    print("ingredients:", len(record.ingredients))
    print("steps:", len(record.steps))
    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
