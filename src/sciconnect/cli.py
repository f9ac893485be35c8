"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import Optional

from .app import SciConnectApp
from .capture import CaptureError, SoundDeviceBackend, list_input_devices
from .config import Config, load_config
from .directory import CauseNotFound, load_directory
from .donations import SandboxPaymentProvider
from .logging_utils import setup_logging
from .models import ALL_TAGS, PERSONALITY_TYPES, SELF, CaptureKind
from .scheduler import ManualScheduler, Scheduler

logger = logging.getLogger("sciconnect")


def _load_settings(config_path: str) -> Config:
    if os.path.exists(config_path):
        return load_config(config_path)
    return Config()


def _build_app(config_path: str, scheduler: Scheduler) -> SciConnectApp:
    config = _load_settings(config_path)
    setup_logging(config)
    backend = SoundDeviceBackend(
        device_name=config.media.device_name,
        sample_rate_hz=config.media.sample_rate_hz,
        channels=config.media.channels,
    )
    return SciConnectApp(
        config=config,
        directory=load_directory(config.directory_path),
        scheduler=scheduler,
        backend=backend,
        payments=SandboxPaymentProvider(),
        config_path=config_path,
    )


async def _chat(app: SciConnectApp, expert_id: Optional[str]) -> None:
    thread = app.start_chat(expert_id)
    expert = app.selected_expert
    print(f"{expert.name} ({expert.field})" if expert else "General Chat")
    shown = 0

    def _show() -> None:
        nonlocal shown
        for message in thread.messages[shown:]:
            prefix = "you" if message.sender == SELF else "sci"
            print(f"[{prefix}] {message.text}")
        shown = len(thread)

    _show()
    loop = asyncio.get_running_loop()
    while True:
        try:
            text = await loop.run_in_executor(None, input, "> ")
        except EOFError:
            break
        if text.strip() in ("/quit", "/exit"):
            break
        app.send_message(text)
        _show()
        await asyncio.sleep(app.conversations.reply_delay + 0.05)
        _show()


async def _call(app: SciConnectApp, kind: CaptureKind, seconds: float, muted: bool) -> None:
    try:
        session = await app.start_call(None, kind)
        if session is None:
            return
        label = "Video" if kind.wants_video else "Audio"
        print(f"{label} call (preview)")
        if session.notice:
            print(f"Notice: {session.notice}")
        if muted:
            app.call.toggle_mic()
        elapsed = 0.0
        while elapsed < seconds:
            await asyncio.sleep(0.5)
            elapsed += 0.5
            if session.live:
                levels = [
                    f"{getattr(track, 'level', 0.0):.3f}"
                    for track in session.stream.audio_tracks()
                ]
                state = "on" if session.mic_enabled else "muted"
                print(f"[{elapsed:5.1f}s] mic {state} level {' '.join(levels)}")
    finally:
        app.end_call()


def main() -> int:
    parser = argparse.ArgumentParser(prog="sciconnect")
    parser.add_argument("--config", default="sciconnect_config.yml", help="Config.")
    sub = parser.add_subparsers(dest="command")

    experts_cmd = sub.add_parser("experts")
    experts_cmd.add_argument("--query", default="", help="Search name, field or bio.")
    experts_cmd.add_argument(
        "--tag",
        default=ALL_TAGS,
        choices=[ALL_TAGS, *PERSONALITY_TYPES],
        help="Personality filter.",
    )

    sub.add_parser("causes")
    cause_cmd = sub.add_parser("cause")
    cause_cmd.add_argument("cause_id", help="Cause id, e.g. c1.")

    donate_cmd = sub.add_parser("donate")
    donate_cmd.add_argument("--cause", help="Cause id. Defaults to config.")
    donate_cmd.add_argument("--amount", help="Whole amount, minimum 1.")

    devices_cmd = sub.add_parser("devices")
    devices_cmd.add_argument("--match", help="Filter device names by substring.")

    chat_cmd = sub.add_parser("chat")
    chat_cmd.add_argument("--expert", help="Scientist id. Omit for general chat.")

    call_cmd = sub.add_parser("call")
    call_cmd.add_argument("--video", action="store_true", help="Request camera too.")
    call_cmd.add_argument("--seconds", type=float, default=5.0, help="Preview length.")
    call_cmd.add_argument("--mute", action="store_true", help="Start with mic muted.")

    profile_cmd = sub.add_parser("profile")
    profile_cmd.add_argument("--name", help="Display name.")
    profile_cmd.add_argument("--personality", choices=PERSONALITY_TYPES)
    profile_cmd.add_argument("--interests", help="Comma-separated interests.")

    args = parser.parse_args()

    if args.command == "devices":
        try:
            devices = list_input_devices()
        except CaptureError as exc:
            print(str(exc))
            return 1
        if args.match:
            devices = [
                d for d in devices if args.match.lower() in d.get("name", "").lower()
            ]
        for device in devices:
            name = device.get("name", "Unknown")
            index = device.get("index", "?")
            channels = device.get("max_input_channels", 0)
            print(f"[{index}] {name} (inputs: {channels})")
        return 0

    if args.command in ("chat", "call"):

        async def _run() -> None:
            app = _build_app(args.config, asyncio.get_running_loop())
            try:
                if args.command == "chat":
                    await _chat(app, args.expert)
                else:
                    kind = CaptureKind.VIDEO if args.video else CaptureKind.AUDIO
                    await _call(app, kind, args.seconds, args.mute)
            finally:
                app.close()

        try:
            asyncio.run(_run())
        except KeyboardInterrupt:
            pass
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    app = _build_app(args.config, ManualScheduler())

    if args.command == "experts":
        app.search(args.query)
        for expert in app.select_tag(args.tag):
            causes = ", ".join(expert.causes)
            print(f"[{expert.id}] {expert.name} - {expert.field} - {expert.personality}")
            print(f"    {expert.bio}")
            if causes:
                print(f"    Causes: {causes}")
        return 0

    if args.command == "causes":
        for cause in app.directory.list_causes():
            print(f"[{cause.id}] {cause.name}: {cause.description} ({cause.impact})")
        return 0

    if args.command == "cause":
        try:
            cause = app.directory.find_cause(args.cause_id)
        except CauseNotFound as exc:
            print(str(exc))
            return 1
        print(cause.name)
        print(f"{cause.description} - {cause.impact}")
        return 0

    if args.command == "donate":
        amount = args.amount if args.amount is not None else app.config.donations.default_amount
        result = app.donate(args.cause, amount)
        print(result.message)
        return 0 if result.succeeded else 1

    if args.command == "profile":
        if args.name or args.personality or args.interests is not None:
            app.save_profile(
                args.name or "",
                args.personality or "",
                args.interests if args.interests is not None else app.profile.interests,
            )
        profile = app.profile
        print(f"Name: {profile.display_name}")
        print(f"Personality: {profile.personality}")
        print(f"Interests: {', '.join(profile.interest_list())}")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
