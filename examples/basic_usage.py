"""
Basic usage example for the jadhr library.

This example demonstrates the core workflow:
1. Load the reference corpus
2. Identify a transcript (corpus first, remote fallback second)
3. Output the result as JSON
4. Optionally play the recitation
"""

import asyncio
import json

from jadhr import Recognizer, format_badge
from jadhr.data import get_corpus_loader, reading_url


async def identify_passage(transcript: str, use_remote: bool = True, play: bool = False):
    """
    Identify a single transcript.

    Args:
        transcript: Arabic transcript of the recitation
        use_remote: Fall back to the remote identifier when nothing matches
        play: Play the identified ayahs afterwards

    Returns:
        The result as a dictionary
    """
    print(f"Identifying: {transcript}")
    print("=" * 50)

    # Step 1: Load the corpus
    print("\n📖 Step 1: Loading reference corpus...")

    corpus = await get_corpus_loader().get()
    if corpus is None:
        print("   Corpus unavailable, relying on the remote identifier")
    else:
        print(f"   Loaded {corpus.chapter_count} surahs, {corpus.verse_count} ayahs")

    # Step 2: Identify
    print("\n🔎 Step 2: Identifying passage...")

    async with Recognizer(use_remote=use_remote) as recognizer:
        result = await recognizer.submit_transcript(transcript)

    print(f"   {format_badge(result)}")
    print(f"   {result.text}")
    if result.score is not None:
        print(f"   (score: {result.score:.2f}, source: {result.source.value})")
    print(f"   {reading_url(result)}")

    # Step 3: Play
    if play:
        from jadhr.playback import PydubClipPlayer, play_result

        print("\n🔊 Step 3: Playing recitation...")
        async with PydubClipPlayer() as player:
            played = await play_result(result, player).wait()
        print(f"   Played {len(played)} ayah(s)")

    return result.model_dump(mode="json")


# Example usage
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python basic_usage.py <transcript> [--play] [--no-remote]")
        print("Example: python basic_usage.py 'قل هو الله احد الله الصمد' --play")
        sys.exit(1)

    transcript = sys.argv[1]
    output = asyncio.run(
        identify_passage(
            transcript,
            use_remote="--no-remote" not in sys.argv,
            play="--play" in sys.argv,
        )
    )

    print("\n📄 Result:")
    print(json.dumps(output, ensure_ascii=False, indent=2))
