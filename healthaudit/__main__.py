#!/usr/bin/env python3
"""
Main entry point for the Health Audit interview system.
Allows running the package with: python -m healthaudit

    python -m healthaudit            # interview in the terminal
    python -m healthaudit --serve    # run the extraction API
"""
import asyncio
import sys

from .config import get_config
from .utils import setup_logging
from .interview.extractor import create_extractor
from .interview.progress import format_progress
from .interview.session import InterviewSession
from .infrastructure.voice import ConsoleVoiceChannel

MUTE_COMMAND = "/mute"
WELCOME_MESSAGE = "Welcome to your health audit. I'll ask you a few short questions about yourself."
CLOSING_MESSAGE = "Thank you, that completes your health audit."


async def run_console_interview(session: InterviewSession, channel: ConsoleVoiceChannel) -> None:
    """Drive one interview over the console channel until summary or exit."""
    if not await session.start():
        print(f"❌ {session.error_message}")
        return

    await channel.say(WELCOME_MESSAGE)
    asked_key = None
    while session.is_active and not session.sequencer.is_complete:
        if session.current_step_key != asked_key:
            asked_key = session.current_step_key
            await channel.say(session.current_question)

        line = await channel.read_utterance()
        if line is None:
            break
        if line.strip().lower() == MUTE_COMMAND:
            if await session.toggle_mute():
                print("🔇 Agent muted" if session.is_muted else "🔊 Agent unmuted")
            else:
                print(f"❌ {session.error_message or 'Mute is only available while connected'}")
            continue

        await session.on_message({"source": "user", "message": line})
        if session.current_step_key == asked_key:
            print("🤔 Sorry, I didn't catch that.")
        print(f"   Progress: {format_progress(session.progress())}")

    if session.sequencer.is_complete:
        await channel.say(CLOSING_MESSAGE)
    await session.end()
    show_summary(session)


def show_summary(session: InterviewSession) -> None:
    result = session.result()
    print("\n" + "=" * 50)
    print("🎯 INTERVIEW COMPLETE" if result.is_complete else "⏹️  INTERVIEW ENDED")
    print("=" * 50)
    for label, value in result.summary_rows:
        print(f"   {label}: {value}")
    print(f"📊 Completion: {result.percentage}% ({result.answered}/{result.total})")
    if result.error_message:
        print(f"❌ Last error: {result.error_message}")
    print(f"📈 Session metrics: {session.metrics.get_metrics()}")


def serve(config) -> None:
    """Run the extraction API with uvicorn."""
    import uvicorn

    print(f"🌐 Serving extraction API on http://{config.api_host}:{config.api_port}")
    uvicorn.run(
        "healthaudit.api.api:create_app",
        factory=True,
        host=config.api_host,
        port=config.api_port,
        log_config=None,
    )


def main():
    """Command-line interface for the health audit."""

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    log_file = setup_logging(config.log_file, level=config.log_level)

    if "--serve" in sys.argv:
        serve(config)
        return

    if not config.has_credentials:
        print("⚠️  GEMINI_API_KEY is not set: answers will be recorded in the transcript but never extracted")

    print("\n🎙️  Starting health audit - type your answers, /mute to toggle the agent, /quit to stop")
    print(f"📝 Detailed logs: {log_file}")
    print("=" * 50)

    channel = ConsoleVoiceChannel(volume=config.speaker_volume)
    session = InterviewSession(create_extractor(config), voice_channel=channel)
    try:
        asyncio.run(run_console_interview(session, channel))
    except KeyboardInterrupt:
        print("\n⏹️  Interview interrupted")


if __name__ == "__main__":
    main()
