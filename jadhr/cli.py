"""Command-line front end for jadhr.

Examples:
    jadhr identify "قل هو الله احد الله الصمد"
    jadhr identify --json --no-remote "بسم الله الرحمن الرحيم"
    jadhr resolve "سورة البقرة"
    jadhr play "قل هو الله احد"
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from jadhr._logging import configure_logging, enable_debug_logging
from jadhr.core.formatting import format_badge
from jadhr.data.surahs import get_surah_name, reading_url, resolve_chapter_number
from jadhr.exceptions import JadhrError
from jadhr.models import MatchResult
from jadhr.pipeline import Recognizer


def emit(result: MatchResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return

    print(format_badge(result))
    print(result.text)
    print(result.translation)
    url = reading_url(result)
    if url:
        print(url)
    if result.score is not None:
        print(f"score: {result.score:.3f}")
    sys.stdout.flush()


async def identify(transcript: str, use_remote: bool = True) -> MatchResult:
    async with Recognizer(use_remote=use_remote) as recognizer:
        return await recognizer.submit_transcript(transcript)


async def identify_and_play(transcript: str, use_remote: bool = True) -> list[int]:
    from jadhr.playback import PydubClipPlayer, play_result

    result = await identify(transcript, use_remote)
    emit(result, as_json=False)
    async with PydubClipPlayer() as player:
        sequence = play_result(result, player)
        try:
            return await sequence.wait()
        except asyncio.CancelledError:
            sequence.cancel()
            raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jadhr", description="Identify a recited Quran passage"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_identify = subparsers.add_parser("identify", help="Identify a transcript")
    p_identify.add_argument("transcript", help="Arabic transcript of the recitation")
    p_identify.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_identify.add_argument(
        "--no-remote", action="store_true", help="Only match against the local corpus"
    )

    p_resolve = subparsers.add_parser("resolve", help="Resolve a surah name to its number")
    p_resolve.add_argument("name", help="Surah name (Arabic or romanized)")

    p_play = subparsers.add_parser("play", help="Identify a transcript and play it")
    p_play.add_argument("transcript", help="Arabic transcript of the recitation")
    p_play.add_argument(
        "--no-remote", action="store_true", help="Only match against the local corpus"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        enable_debug_logging()
    else:
        configure_logging()

    if args.command == "resolve":
        number = resolve_chapter_number(args.name)
        if not number:
            print(f"Unknown surah: {args.name}", file=sys.stderr)
            return 1
        print(f"{number} {get_surah_name(number)}")
        return 0

    try:
        if args.command == "identify":
            result = asyncio.run(identify(args.transcript, not args.no_remote))
            emit(result, args.json)
        else:
            played = asyncio.run(identify_and_play(args.transcript, not args.no_remote))
            print(f"played {len(played)} ayah(s)")
    except JadhrError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
