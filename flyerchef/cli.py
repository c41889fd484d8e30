"""CLI entry point for flyer analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .analysis import create_analyzer
from .config import load_config
from .models import CuisineType, FlyerSubmission
from .request import parse_budget
from .session import FlyerChefSession


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="flyerchef",
        description="チラシ de 献立 — スーパーのチラシから特売品を使ったレシピを提案します",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="設定ファイルのパス (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="デバッグログを表示"
    )

    sub = parser.add_subparsers(dest="command")

    # cuisines
    sub.add_parser("cuisines", help="選べるジャンル一覧を表示")

    # budgets
    sub.add_parser("budgets", help="予算の目安一覧を表示")

    # analyze
    analyze_parser = sub.add_parser("analyze", help="チラシを解析してレシピを提案")
    analyze_parser.add_argument("file", type=str, help="チラシの画像または PDF")
    analyze_parser.add_argument(
        "--budget", "-b", type=str, default=None, help="予算 (円)"
    )
    analyze_parser.add_argument(
        "--cuisine", type=str, default=None,
        help="ジャンル (japanese / 和食 など)",
    )
    analyze_parser.add_argument(
        "--custom-cuisine", type=str, default=None,
        help="ジャンルが「その他」のときの内容 (例: イタリアン)",
    )
    analyze_parser.add_argument("--json", action="store_true", help="JSON形式で出力")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    load_dotenv(find_dotenv(usecwd=True))
    config = load_config(args.config)

    match args.command:
        case "cuisines":
            _cmd_cuisines()
        case "budgets":
            _cmd_budgets(config)
        case "analyze":
            asyncio.run(_cmd_analyze(config, args))


def _cmd_cuisines() -> None:
    print(f"選べるジャンル: {len(CuisineType)} 種類")
    for c in CuisineType:
        print(f"  {c.name.lower():<12} {c.label}")


def _cmd_budgets(config) -> None:
    presets = config.preferences.budget_presets
    print(f"予算の目安: {len(presets)} 通り (--budget で任意の金額も指定できます)")
    for amount in presets:
        default_mark = " (デフォルト)" if amount == config.preferences.budget else ""
        print(f"  {amount}円{default_mark}")


async def _cmd_analyze(config, args) -> None:
    try:
        analyzer = create_analyzer(config)
    except (ValueError, ImportError) as e:
        print(f"設定エラー: {e}", file=sys.stderr)
        sys.exit(1)

    session = FlyerChefSession(analyzer, config.preferences.defaults())

    try:
        submission = FlyerSubmission.from_path(args.file)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    session.select_file(submission)

    changes: dict = {}
    if args.budget is not None:
        changes["budget"] = parse_budget(args.budget)
    if args.cuisine is not None:
        try:
            changes["cuisine"] = CuisineType.parse(args.cuisine)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
    if args.custom_cuisine is not None:
        cuisine = changes.setdefault("cuisine", CuisineType.OTHER)
        if cuisine is not CuisineType.OTHER:
            print(
                f"--custom-cuisine はジャンル「{CuisineType.OTHER.label}」のときだけ使えます "
                f"(指定されたジャンル: {cuisine.label})",
                file=sys.stderr,
            )
            sys.exit(1)
        changes["custom_cuisine"] = args.custom_cuisine
    if changes:
        session.update_preferences(**changes)

    if not args.json:
        print("🔍 チラシを解析中...")
    result = await session.submit()

    if result is None:
        print(session.error, file=sys.stderr)
        session.reset()
        sys.exit(1)

    if args.json:
        data = {
            "budget": session.preferences.budget,
            "cuisine": session.preferences.effective_cuisine,
            **result.to_dict(),
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        print()
        print(session.summary())
