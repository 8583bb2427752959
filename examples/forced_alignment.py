#!/usr/bin/env python3
"""
Forced alignment example using bas-client

This example aligns a recording with its transcription using the MAUS
services of the Bavarian Archive for Speech Signals.
"""

import asyncio
import sys
from pathlib import Path

# Add the src directory to the path so we can import bas_client
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bas_client import BASClient, BASError


async def align(language: str, signal: str, transcript: str, output_file: str = None):
    """
    Align a recording with a plain text transcript

    Args:
        language: Language of the recording (e.g. "en-NZ", "English", "deu")
        signal: Audio file path
        transcript: Text file path
        output_file: Where to save the TextGrid (next to the audio if None)
    """
    output_path = Path(output_file) if output_file else Path(signal).with_suffix(".TextGrid")

    async with BASClient() as bas:
        print(f"🌐 Language: {language} -> {bas.tag(language)}")
        print(f"🎵 Aligning {signal} with {transcript}...")

        try:
            response = await bas.maus_basic(language, signal, transcript)
        except BASError as e:
            print(f"❌ Alignment failed: {e}")
            return

        if not response.success:
            print("❌ The service could not align the recording")
            print(f"📝 Output: {response.output.strip()}")
            if response.warnings.strip():
                print(f"⚠️  Warnings: {response.warnings.strip()}")
            return

        saved = await bas.save_download(response, output_path)
        print("✅ Alignment complete!")
        print(f"📄 TextGrid saved to: {saved}")


async def transcribe(language: str, text: str):
    """
    Print the phonemic transcription of a piece of text

    Args:
        language: Language of the text
        text: Text to transcribe
    """
    async with BASClient() as bas:
        response = await bas.g2p_text(language, text, oform="tab")
        if not response.success:
            print(f"❌ G2P failed: {response.output.strip()}")
            return

        saved = await bas.save_download(response)
        print(saved.read_text(encoding="utf-8"))
        saved.unlink()


def main():
    """Main function"""

    if len(sys.argv) < 3:
        print("Usage:")
        print(f"  {sys.argv[0]} align <language> <audio_file> <text_file> [output_file]")
        print(f"  {sys.argv[0]} g2p <language> \"<text>\"")
        print()
        print("Examples:")
        print(f"  {sys.argv[0]} align en-NZ interview.wav interview.txt")
        print(f"  {sys.argv[0]} g2p German \"Guten Morgen\"")
        sys.exit(1)

    command = sys.argv[1]

    if command == "align" and len(sys.argv) >= 5:
        output_file = sys.argv[5] if len(sys.argv) > 5 else None
        asyncio.run(align(sys.argv[2], sys.argv[3], sys.argv[4], output_file))
    elif command == "g2p" and len(sys.argv) >= 4:
        asyncio.run(transcribe(sys.argv[2], sys.argv[3]))
    else:
        print(f"❌ Unknown command or missing arguments: {' '.join(sys.argv[1:])}")
        sys.exit(1)


if __name__ == "__main__":
    main()
